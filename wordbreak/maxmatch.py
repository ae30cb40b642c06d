import os
import json
import logging
from wordbreak.utils import Segmenter, DictionaryLoadError, Trie, is_combining_mark, read_words
from typing import List

logger = logging.getLogger(__name__)


class LongestMatch(Segmenter):
    """
    A greedy dictionary segmenter based on maximal matching.

    Scans the text left to right and, at each position, emits the longest
    dictionary word starting there. Characters that start no dictionary word
    become single-character tokens, keeping a following combining mark attached.
    """

    def select_match(self, matches: List[str]) -> str:
        """
        Pick the token to emit among the prefix matches at the current position.

        Args:
            matches (List[str]): Prefix matches, shortest first.

        Returns:
            str: The longest match.
        """
        return matches[-1]

    def segment(self, text: str) -> List[str]:
        """
        Split unspaced text into dictionary words and fallback fragments.

        Args:
            text (str): The text to segment.

        Returns:
            List[str]: Tokens in order; their concatenation equals `text`.
        """
        if not isinstance(text, str):
            raise TypeError("Text to segment must be a string.")

        tokens: List[str] = []
        i = 0

        while i < len(text):
            # 1. Look up every dictionary word starting at i
            matches = self.trie.matches_at_prefix(text, i)

            # 2. Emit the selected match
            if matches is not None:
                token = self.select_match(matches)
                tokens.append(token)
                i += len(token)
                continue

            # 3. Fallback: one character, plus a tone mark that modifies it
            if i + 1 < len(text) and is_combining_mark(text[i + 1]):
                tokens.append(text[i:i + 2])
                i += 2
            else:
                tokens.append(text[i])
                i += 1

        return tokens

    def tokenize(self, text: str) -> List[str]:
        """
        Segment text chunk by chunk after pre-tokenization.

        With a Hugging Face pre-tokenizer, whitespace is dropped and punctuation is
        split off before segmenting; otherwise this is the same as `segment`.
        Chunks are cut from `text` by their offsets, so characters a pre-tokenizer
        rewrites (e.g. the Metaspace '▁') never reach the output.

        Args:
            text (str): The text to tokenize.

        Returns:
            List[str]: A flat list of tokens.
        """
        if not isinstance(text, str):
            raise TypeError("Text to tokenize must be a string.")

        if self.pre_tokenizer is None:
            return self.segment(text)

        offsets = [offset for _, offset in self.preprocessing([text])[0]]
        return [
            tok
            for start, end in offsets
            for tok in self.segment(text[start:end])
            if not tok.isspace()
        ]

    def save_resources(self, path: str) -> None:
        """
        Save the dictionary to a JSON file.

        Args:
            path (str): Directory where 'lexicon.json' will be written.
        """
        os.makedirs(path, exist_ok=True)
        lexicon_file = os.path.join(path, "lexicon.json")
        with open(lexicon_file, "w", encoding="utf-8") as f:
            json.dump(sorted(self.trie.words()), f, ensure_ascii=False)
        logger.info("Saved %d words to %s", len(self.trie), lexicon_file)

    def load_resources(self, path: str) -> None:
        """
        Replace the dictionary with the one saved in the specified directory.

        Args:
            path (str): Directory from which 'lexicon.json' will be read.
        """
        lexicon_file = os.path.join(path, "lexicon.json")
        if not os.path.isfile(lexicon_file):
            raise DictionaryLoadError(f"No saved lexicon at {lexicon_file}")
        self.trie = Trie(read_words(lexicon_file)).freeze()
        logger.info("Loaded %d words from %s", len(self.trie), lexicon_file)


class ShortestMatch(LongestMatch):
    """Minimal-matching variant: emits the shortest dictionary word at each position."""

    def select_match(self, matches: List[str]) -> str:
        return matches[0]
