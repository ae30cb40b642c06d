"""
This program downloads a word-segmented corpus from the Hugging Face Hub and saves its
vocabulary as a dictionary file (one word per line) usable with `cli.py --dictionary`.
The corpus must store pre-segmented text, with words separated by spaces.
"""

import os
import argparse
from datasets import load_dataset
from typing import Dict, List, Optional, Any


def build_lexicon(dataset_splits: Dict[str, Any], feature_name: str, num_words: Optional[int] = None) -> List[str]:
    """
    Collect the unique words of several dataset splits, in order of first appearance.

    Args:
        dataset_splits (Dict[str, Dataset]): Dictionary of dataset splits (e.g., 'train', 'test', 'validation').
        feature_name (str): The key holding space-separated words in each example.
        num_words (Optional[int]): Maximum number of words to include.

    Returns:
        List[str]: Unique dictionary words.
    """

    seen = set()
    lexicon = []

    # Iterate over all dataset splits
    for _, dataset in dataset_splits.items():
        # Iterate over each example in the current split
        for example in dataset:
            value = example.get(feature_name)
            if value is None:
                continue
            words = value if isinstance(value, list) else value.split()
            for word in words:
                if word in seen:
                    continue
                seen.add(word)
                lexicon.append(word)
                # Stop early if the number of desired words is reached
                if num_words is not None and len(lexicon) >= num_words:
                    return lexicon

    return lexicon


def save_lexicon(lexicon: List[str], output_path: str) -> None:
    """Write one word per line, creating the parent directory if needed."""
    directory = os.path.dirname(output_path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(output_path, 'w', encoding='utf-8') as f:
        for word in lexicon:
            f.write(word + "\n")


def main() -> None:
    """
    Loads all splits of the dataset, combines their vocabularies, and saves them as a text file.
    """
    parser = argparse.ArgumentParser(description="Build a segmentation dictionary from a Hugging Face dataset.")
    parser.add_argument("dataset", help="dataset name on the Hugging Face Hub")
    parser.add_argument("--config", default=None, help="dataset configuration name")
    parser.add_argument("--feature", default="text", help="feature holding space-separated words (default: 'text')")
    parser.add_argument("--splits", nargs="+", default=["train"], help="splits to read (default: train)")
    parser.add_argument("--num-words", type=int, default=None, help="maximum number of words to keep")
    parser.add_argument("--output", default="data/lexicon.txt", help="output path (default: data/lexicon.txt)")
    args = parser.parse_args()

    dataset_splits = {}

    # Load each dataset split into a dictionary
    for split in args.splits:
        dataset_splits[split] = load_dataset(args.dataset, name=args.config, split=split)

    lexicon = build_lexicon(dataset_splits, feature_name=args.feature, num_words=args.num_words)
    print(f"Collected {len(lexicon)} words." if lexicon else "No words collected.")

    save_lexicon(lexicon, args.output)
    print(f"Saved {len(lexicon)} words to {args.output}")


if __name__ == '__main__':
    main()
