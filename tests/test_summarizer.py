"""Tests for the extractive summarizer."""

from news_digest.summarize.summarizer import split_sentences, summarize


def test_fewer_than_three_sentences_returned_whole():
    assert summarize("Short one. Another.", "Title") == "Short one. Another."


def test_single_cjk_block_returned_as_is():
    text = "這是一篇關於人工智慧與機器學習的技術文章，內容涵蓋模型訓練、資料處理與實際應用。"
    assert summarize(text, "標題") == text


def test_filters_title_echo_and_short_sentences():
    text = (
        "Title Here is echoed in this sentence. Tiny. "
        "This is a perfectly normal sentence. Here is another reasonable sentence! "
        "And a third valid sentence? Fourth valid sentence goes here."
    )

    summary = summarize(text, "Title Here")

    assert summary == (
        "This is a perfectly normal sentence. Here is another reasonable sentence! "
        "And a third valid sentence?"
    )


def test_length_bounds_are_exclusive():
    ten_chars = "Ten chars."
    too_long = "A" * 199 + "."
    text = f"{ten_chars} {too_long} Eleven char. Kept sentence here."

    summary = summarize(text, "Unrelated")

    assert not summary.startswith(ten_chars)
    assert too_long not in summary
    assert summary == "Eleven char. Kept sentence here."


def test_cjk_sentence_boundaries():
    text = (
        "今天天氣很好，我們去公園散步。\n"
        "下午開始下雨，大家趕緊回家避雨。\n"
        "晚上雨停了，街道變得非常安靜。"
    )

    assert split_sentences(text) == [
        "今天天氣很好，我們去公園散步。",
        "下午開始下雨，大家趕緊回家避雨。",
        "晚上雨停了，街道變得非常安靜。",
    ]
    assert summarize(text, "天氣預報") == (
        "今天天氣很好，我們去公園散步。 下午開始下雨，大家趕緊回家避雨。 晚上雨停了，街道變得非常安靜。"
    )


def test_summary_is_deterministic():
    text = "First sentence is here. Second sentence is here. Third sentence is here. Fourth one too."

    assert summarize(text, "T") == summarize(text, "T")


def test_all_sentences_invalid_gives_empty_summary():
    text = "Tiny. Small. Wee."

    assert summarize(text, "Whatever") == ""
