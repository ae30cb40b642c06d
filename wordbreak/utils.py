"""Dictionary trie and shared helpers for dictionary-based word segmentation."""

import os
import json
import logging
from tqdm import tqdm
from transformers import PreTrainedTokenizerFast
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)

# Thai tone marks and the vowel shortener (MAITAIKHU, MAI EK, MAI THO, MAI TRI, MAI CHATTAWA).
# An unmatched base character is never separated from one of these.
COMBINING_MARKS = frozenset({"\u0e47", "\u0e48", "\u0e49", "\u0e4a", "\u0e4b"})


def is_combining_mark(char: str) -> bool:
    """Return True if `char` is a combining mark that must stay with its base character."""
    return char in COMBINING_MARKS


class DictionaryLoadError(OSError):
    """Raised when a dictionary source cannot be read into a trie."""


class TrieNode:
    """A node in the dictionary trie."""

    __slots__ = ("children", "is_word")

    def __init__(self) -> None:
        # Dictionary of child nodes (char -> TrieNode)
        self.children: Dict[str, "TrieNode"] = {}
        # Indicates if the path to this node spells a dictionary word
        self.is_word = False


class Trie:
    """
    Prefix tree over the characters of the dictionary words.

    The trie is built once (`insert`) and becomes read-only after `freeze`,
    which every segmenter calls on the trie it is handed.
    """

    def __init__(self, words: Iterable[str] = (), verbose: bool = False) -> None:
        # Root represents the empty prefix
        self.root = TrieNode()
        self.frozen = False
        self._size = 0
        self._node_count = 0
        for word in tqdm(words, desc="Building trie", disable=not verbose):
            self.insert(word)

    def insert(self, word: str) -> None:
        """
        Insert a word into the trie, creating nodes as needed.
        Marks the last node as the end of a dictionary word.

        Args:
            word (str): The word to insert. The empty string is ignored.
        """
        if not isinstance(word, str):
            raise TypeError("Word to insert must be a string.")
        if self.frozen:
            raise RuntimeError("Trie is read-only once handed to a segmenter.")
        if not word:
            return

        node = self.root
        for char in word:
            if char not in node.children:
                node.children[char] = TrieNode()
                self._node_count += 1
            node = node.children[char]

        if not node.is_word:
            node.is_word = True
            self._size += 1

    def freeze(self) -> "Trie":
        """End the build phase; any later `insert` raises."""
        self.frozen = True
        return self

    def matches_at_prefix(self, text: str, start: int = 0) -> Optional[List[str]]:
        """
        Collect every dictionary word that is a prefix of text[start:].

        Args:
            text (str): The text to walk.
            start (int): Index in `text` where the walk begins.

        Returns:
            Optional[List[str]]: Matches ordered from shortest to longest,
            or None if no dictionary word starts at `start`.
        """
        node = self.root
        matches: List[str] = []

        # Go down the trie as far as possible
        for i in range(start, len(text)):
            node = node.children.get(text[i])
            if node is None:
                break
            if node.is_word:
                matches.append(text[start:i + 1])

        return matches or None

    def __contains__(self, word: object) -> bool:
        if not isinstance(word, str) or not word:
            return False
        node = self.root
        for char in word:
            node = node.children.get(char)
            if node is None:
                return False
        return node.is_word

    def __len__(self) -> int:
        return self._size

    @property
    def node_count(self) -> int:
        """Number of nodes, not counting the root."""
        return self._node_count

    def words(self) -> Iterator[str]:
        """Iterate over every stored word (depth-first, no particular order)."""
        stack: List[Tuple[TrieNode, str]] = [(self.root, "")]
        while stack:
            node, prefix = stack.pop()
            if node.is_word:
                yield prefix
            for char, child in node.children.items():
                stack.append((child, prefix + char))


def read_words(path: str) -> List[str]:
    """
    Read dictionary words from a .txt (one per line) or .json (list of strings) file.

    Raises:
        DictionaryLoadError: if the file is missing, unreadable or malformed.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.lower().endswith(".json"):
                words = json.load(f)
            else:
                words = f.read().splitlines()
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DictionaryLoadError(f"Could not load dictionary from {path}: {e}") from e

    if not isinstance(words, list) or not all(isinstance(word, str) for word in words):
        raise DictionaryLoadError(f"Dictionary {path} must be a list of strings.")
    return words


def load_dictionary(path: str, verbose: bool = False) -> Trie:
    """
    Build a trie from a dictionary file.

    Args:
        path (str): Path to a .txt or .json dictionary.
        verbose (bool): Show a progress bar while building.

    Returns:
        Trie: A fully built trie. No partial trie is ever returned.
    """
    if not os.path.isfile(path):
        raise DictionaryLoadError(f"Dictionary not found: {path}")
    trie = Trie(read_words(path), verbose=verbose)
    logger.info("Loaded %d words (%d nodes) from %s", len(trie), trie.node_count, path)
    return trie


class Segmenter:
    """A parent class for dictionary-based segmenters."""

    def __init__(self, trie: Optional[Trie] = None, tokenizer: Optional[PreTrainedTokenizerFast] = None) -> None:
        """
        Args:
            trie (Trie): The dictionary trie. It is frozen on hand-over.
            tokenizer (PreTrainedTokenizerFast): Optional Hugging Face tokenizer whose
                pre-tokenizer splits text on whitespace and punctuation before segmenting.
        """
        self.trie = (trie if trie is not None else Trie()).freeze()
        self.tokenizer = tokenizer

    def preprocessing(self, corpus: List[str]) -> List[List[Tuple[str, Tuple[int, int]]]]:
        """
        Pre-tokenize the input corpus.

        Args:
            corpus (List[str]): A list of sentences to preprocess.

        Returns:
            List[List[Tuple[str, Tuple[int, int]]]]: Each sentence as a list of
            chunks with their character offsets. Without a pre-tokenizer, each
            sentence is a single chunk.
        """
        pre_tokenizer = self.pre_tokenizer
        if pre_tokenizer is None:
            return [[(example, (0, len(example)))] for example in corpus]
        return [pre_tokenizer.pre_tokenize_str(example) for example in corpus]

    @property
    def pre_tokenizer(self):
        """The tokenizer's pre-tokenizer, or None (no tokenizer, or a model without one)."""
        if self.tokenizer is None:
            return None
        return self.tokenizer.backend_tokenizer.pre_tokenizer
