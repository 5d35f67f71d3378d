"""Unit tests for keyword extraction."""

from .keywords import STOP_WORDS, extract_keywords


def describe_extract_keywords():
    def it_lowercases_and_splits_on_whitespace():
        assert extract_keywords("FastAPI   Docker\nKubernetes") == ["fastapi", "docker", "kubernetes"]

    def it_replaces_punctuation_with_spaces():
        assert extract_keywords("redis,postgres;(graphql)") == ["redis", "postgres", "graphql"]

    def it_keeps_plus_hash_dot_and_dash():
        assert extract_keywords("c++ c# node.js scikit-learn") == ["c++", "node.js", "scikit-learn"]

    def it_drops_tokens_of_two_chars_or_less():
        assert extract_keywords("go is ok but rust wins") == ["but", "rust", "wins"]

    def it_drops_stop_words():
        assert extract_keywords("The project uses Python for the app") == ["python"]

    def it_dedupes_preserving_first_seen_order():
        assert extract_keywords("react redux react hooks redux") == ["react", "redux", "hooks"]

    def it_handles_empty_and_none():
        assert extract_keywords("") == []
        assert extract_keywords(None) == []

    def it_treats_non_ascii_letters_as_separators():
        assert extract_keywords("café→backend") == ["caf", "backend"]

    def it_is_deterministic():
        text = "A CLI for parsing JSON, YAML and TOML with Rust + WebAssembly"
        assert extract_keywords(text) == extract_keywords(text)

    def it_is_a_no_op_on_its_own_output():
        text = "Realtime chat server: WebSockets, Redis pub/sub & Postgres (v2.1) -- see docs!"
        tokens = extract_keywords(text)
        assert extract_keywords(" ".join(tokens)) == tokens

    def it_never_emits_stop_words_or_short_tokens():
        text = " ".join(sorted(STOP_WORDS)) + " a an to of ml ai kotlin"
        tokens = extract_keywords(text)
        assert tokens == ["kotlin"]
        for token in tokens:
            assert len(token) > 2
            assert token not in STOP_WORDS
