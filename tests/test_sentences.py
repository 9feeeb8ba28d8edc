from utils.sentences import split_sentences


def test_split_sentences_on_terminators():
    assert split_sentences("猫がいる。犬もいる！本当？") == ["猫がいる。", "犬もいる！", "本当？"]


def test_split_sentences_keeps_quoted_terminators():
    text = "彼は「行くよ。待ってて！」と言った。それから帰った。"
    assert split_sentences(text) == ["彼は「行くよ。待ってて！」と言った。", "それから帰った。"]


def test_split_sentences_on_newlines_and_blank_lines():
    assert split_sentences("一行目\n\n二行目\n") == ["一行目", "二行目"]


def test_split_sentences_keeps_unterminated_tail():
    assert split_sentences("猫がいる。犬") == ["猫がいる。", "犬"]


def test_split_sentences_tolerates_stray_closing_quote():
    assert split_sentences("」猫。犬。") == ["」猫。", "犬。"]


def test_split_sentences_empty():
    assert split_sentences("   ") == []
