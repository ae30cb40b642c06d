import pytest

from wordbreak.utils import Trie

THAI_WORDS = ["สวัสดี", "ครับ", "คุณ", "ไป", "ที่ไหน"]


@pytest.fixture
def thai_trie():
    return Trie(THAI_WORDS)


@pytest.fixture
def dictionary_file(tmp_path):
    path = tmp_path / "lexicon.txt"
    path.write_text("\n".join(THAI_WORDS) + "\n", encoding="utf-8")
    return path
