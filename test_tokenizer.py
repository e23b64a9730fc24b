from tokenizer import contains_word, normalize_term, tokenize


def test_tokenize_splits_and_strips():
    assert tokenize("AI-powered, cloud/ML.") == ["ai-powered", "cloud", "ml"]


def test_tokenize_strips_symbols_on_both_sides():
    assert tokenize('"Hello" (world)! -- ok') == ["hello", "world", "ok"]


def test_tokenize_keeps_order_and_duplicates():
    assert tokenize("data data. DATA") == ["data", "data", "data"]


def test_tokenize_empty():
    assert tokenize("") == []
    assert tokenize(None) == []
    assert tokenize(" ... , / ") == []


def test_whole_token_match_only():
    assert not contains_word("A mobility app", "mobile")
    assert contains_word("The mobile app for teams", "Mobile")
    assert contains_word("Built for AI-powered teams", "ai-powered")


def test_term_is_normalized():
    assert normalize_term("  Blockchain ") == "blockchain"
    assert contains_word("We use blockchain.", "  BLOCKCHAIN ")
    assert not contains_word("anything", "   ")
