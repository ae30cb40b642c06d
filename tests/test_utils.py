import json

import pytest

from wordbreak.utils import (
    COMBINING_MARKS,
    DictionaryLoadError,
    Trie,
    Segmenter,
    is_combining_mark,
    load_dictionary,
)


def test_insert_and_contains(thai_trie):
    assert "สวัสดี" in thai_trie
    assert "สวัส" not in thai_trie
    assert "" not in thai_trie
    assert len(thai_trie) == 5


def test_shared_prefixes_are_merged():
    trie = Trie(["ab", "abc", "abd"])
    assert trie.node_count == 4
    assert list(trie.root.children) == ["a"]


def test_insert_is_idempotent():
    once = Trie(["ไป"])
    twice = Trie(["ไป", "ไป"])
    assert len(once) == len(twice) == 1
    assert once.node_count == twice.node_count
    assert once.matches_at_prefix("ไปไหน") == twice.matches_at_prefix("ไปไหน") == ["ไป"]


def test_empty_word_is_ignored():
    trie = Trie([""])
    assert len(trie) == 0
    assert not trie.root.is_word
    assert trie.matches_at_prefix("abc") is None


def test_insert_rejects_non_string():
    with pytest.raises(TypeError):
        Trie().insert(42)


def test_frozen_trie_rejects_insert():
    trie = Trie(["a"]).freeze()
    with pytest.raises(RuntimeError):
        trie.insert("b")
    assert "b" not in trie


def test_matches_shortest_to_longest():
    trie = Trie(["สวัสดีครับ", "สวัสดี", "ส"])
    assert trie.matches_at_prefix("สวัสดีครับผม") == ["ส", "สวัสดี", "สวัสดีครับ"]


def test_matches_from_start_index():
    trie = Trie(["ครับ"])
    assert trie.matches_at_prefix("สวัสดีครับ", 6) == ["ครับ"]
    assert trie.matches_at_prefix("สวัสดีครับ", 0) is None


def test_no_match_when_walk_stops_before_a_word():
    trie = Trie(["abc"])
    assert trie.matches_at_prefix("abx") is None
    assert trie.matches_at_prefix("ab") is None
    assert trie.matches_at_prefix("") is None


def test_words_roundtrip(thai_trie):
    assert sorted(thai_trie.words()) == sorted(["สวัสดี", "ครับ", "คุณ", "ไป", "ที่ไหน"])


def test_combining_marks():
    assert COMBINING_MARKS == {"\u0e47", "\u0e48", "\u0e49", "\u0e4a", "\u0e4b"}
    assert is_combining_mark("\u0e49")
    # MAI HAN-AKAT is a vowel sign, not a tone mark
    assert not is_combining_mark("\u0e31")
    assert not is_combining_mark("a")


def test_load_dictionary_txt(dictionary_file):
    trie = load_dictionary(str(dictionary_file))
    assert len(trie) == 5
    assert "ที่ไหน" in trie


def test_load_dictionary_strips_crlf_and_blank_lines(tmp_path):
    path = tmp_path / "words.txt"
    path.write_bytes("ไป\r\n\r\nคุณ\r\n".encode("utf-8"))
    trie = load_dictionary(str(path))
    assert sorted(trie.words()) == ["คุณ", "ไป"]


def test_load_dictionary_json(tmp_path):
    path = tmp_path / "words.json"
    path.write_text(json.dumps(["ไป", "คุณ"], ensure_ascii=False), encoding="utf-8")
    assert len(load_dictionary(str(path))) == 2


def test_load_dictionary_missing_file(tmp_path):
    with pytest.raises(DictionaryLoadError):
        load_dictionary(str(tmp_path / "missing.txt"))


def test_load_dictionary_undecodable(tmp_path):
    path = tmp_path / "latin1.txt"
    path.write_bytes(b"\xff\xfe\xfa")
    with pytest.raises(DictionaryLoadError):
        load_dictionary(str(path))


def test_load_dictionary_malformed_json(tmp_path):
    path = tmp_path / "words.json"
    path.write_text('{"not": "a list"}', encoding="utf-8")
    with pytest.raises(DictionaryLoadError):
        load_dictionary(str(path))


def test_load_error_is_an_os_error(tmp_path):
    with pytest.raises(OSError):
        load_dictionary(str(tmp_path / "missing.txt"))


def test_segmenter_freezes_trie(thai_trie):
    Segmenter(thai_trie)
    assert thai_trie.frozen


def test_preprocessing_without_tokenizer():
    assert Segmenter().preprocessing(["ab cd"]) == [[("ab cd", (0, 5))]]
