import json
import os
import shutil
import logging
import argparse
from functools import partial
from argparse import RawTextHelpFormatter
from transformers import AutoTokenizer
from wordbreak.utils import DictionaryLoadError, load_dictionary
from wordbreak.maxmatch import LongestMatch, ShortestMatch
from wordbreak.benchmarks import benchmarks


# Cleaner help display
MyFormatter = partial(RawTextHelpFormatter, max_help_position=70, width=100)

# Available segmenters
SEGMENTERS = {
    "LongestMatch": LongestMatch,
    "ShortestMatch": ShortestMatch,
}


def read_inputs(parser, arg):
    """Return the list of sentences in a .json file, or the argument itself as a single sentence."""
    if not (os.path.isfile(arg) and arg.lower().endswith('.json')):
        return [arg]

    try:
        with open(arg, "r", encoding="utf-8") as f:
            inputs = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        parser.error(f"Could not read {arg}: {e}")

    if not isinstance(inputs, list) or not all(isinstance(text, str) for text in inputs):
        parser.error(f"{arg} must contain a list of strings")
    return inputs


# Defines the CLI
def main():
    parser = argparse.ArgumentParser(
        prog="cli.py",
        description=(
            "Dictionary Word Segmentation CLI\n\n"
            "A command-line tool to segment unspaced text (e.g. Thai) with a dictionary trie.\n"
        ),
        formatter_class=MyFormatter,
        epilog=(
            "Usage examples:\n\n"
            "Segmentation:\n"
            "  Segment a single sentence:\n"
            "    python cli.py --model LongestMatch --dictionary data/lexitron.txt --tokenize \"สวัสดีครับ\"\n"
            "  Segment a .json list of sentences:\n"
            "    python cli.py --model LongestMatch --dictionary data/lexitron.txt --tokenize data/test.json\n"
            "  Save the dictionary for future use:\n"
            "    python cli.py --model LongestMatch --dictionary data/lexitron.txt --save my_lexicon\n"
            "  Segment with a saved dictionary:\n"
            "    python cli.py --model LongestMatch --pretrained my_lexicon --tokenize data/test.json\n\n"
            "Benchmarking:\n"
            "  Benchmark a segmenter on a .json list:\n"
            "    python cli.py --model LongestMatch --dictionary data/lexitron.txt --benchmark data/test.json\n"
            "  Compare matching policies:\n"
            "    python cli.py --model LongestMatch ShortestMatch --pretrained my_lexicon --benchmark data/test.json --compare\n\n"
            "Resetting:\n"
            "  Reset a model's saved resources:\n"
            "    python cli.py --model LongestMatch --reset my_lexicon\n"
        )
    )

    # Selecting a model
    parser.add_argument(
        "-m", "--model",
        choices=SEGMENTERS,
        nargs="+",
        metavar=("MODEL1", "MODEL2"),
        required=True,
        help=(
            "select primary segmenter (required) and optional other segmenters for comparison: "
            f"{', '.join(SEGMENTERS.keys())}"
        )
    )

    # Dictionary source
    parser.add_argument(
        "-d", "--dictionary",
        type=str,
        metavar="DICTIONARY",
        help="path to a .txt (one word per line) or .json dictionary"
    )

    # Optional pre-tokenization
    parser.add_argument(
        "--normalize_with",
        type=str,
        metavar="HF_TOKENIZER",
        default=None,
        help="HuggingFace tokenizer whose pre-tokenizer splits whitespace and punctuation before --tokenize and --benchmark"
    )

    # Save the dictionary
    parser.add_argument(
        "--save",
        type=str,
        metavar="PATH",
        help="save the dictionary in resources/PATH for later use"
    )

    # Load a saved dictionary
    parser.add_argument(
        "--pretrained",
        type=str,
        metavar="PATH",
        help="load a saved dictionary from resources/PATH"
    )

    # Segment a string or a list of strings in a .json file
    parser.add_argument(
        "--tokenize",
        type=str,
        metavar="TEST_DATA",
        help="string to segment or path to .json file for segmentation"
    )

    # Benchmark models
    parser.add_argument(
        "-b", "--benchmark",
        type=str,
        metavar="INPUT",
        help="benchmark the selected segmenter(s) on a string or a .json list of sentences"
    )

    parser.add_argument(
        "-c", "--compare",
        action="store_true",
        help="with --benchmark, only run token-sequence equivalence between segmenters"
    )

    # Reset saved resources for selected models
    parser.add_argument(
        "--reset",
        type=str,
        metavar="PATH",
        help="delete the saved dictionary of the selected segmenters in resources/PATH"
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="log progress while loading and saving dictionaries"
    )

    # Store the arguments so that we can use them
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s: %(message)s'
    )


    # RESET RESOURCES
    if args.reset:
        for model_name in args.model:

            # Get the correct path: resources/PATH/MODEL_NAME
            resource_path = os.path.join("resources", args.reset, model_name)

            if os.path.isdir(resource_path):
                shutil.rmtree(resource_path)
                print(f"Reset resources for {model_name}")
            else:
                print(f"No resources to reset for {model_name}")

        return

    if not args.dictionary and not args.pretrained:
        parser.error("one of --dictionary or --pretrained is required")
    if args.compare and args.benchmark is None:
        parser.error("--compare may only be used with --benchmark")
    if args.compare and len(args.model) < 2:
        parser.error("--compare requires at least two segmenters")


    # LOAD NORMALIZATION
    hf_tokenizer = AutoTokenizer.from_pretrained(args.normalize_with) if args.normalize_with else None


    # INSTANTIATE MODELS
    # The trie is built once and shared read-only by every segmenter
    try:
        trie = load_dictionary(args.dictionary, verbose=args.verbose) if args.dictionary else None
    except DictionaryLoadError as e:
        parser.error(str(e))

    segmenter_instances = {}
    for model_name in args.model:
        segmenter_instances[model_name] = SEGMENTERS[model_name](trie, tokenizer=hf_tokenizer)


    # IF PRETRAINED
    if args.pretrained and not args.dictionary:
        for name, seg in segmenter_instances.items():
            resource_path = os.path.join("resources", args.pretrained, name)
            try:
                seg.load_resources(resource_path)
            except DictionaryLoadError as e:
                parser.error(str(e))
            print(f"Loaded saved dictionary for {name} from {resource_path}")

    print(f"Loaded segmenter model(s): {', '.join(segmenter_instances.keys())}")


    # SEGMENTATION
    if args.tokenize is not None:
        print("Segmenting input...")
        inputs = read_inputs(parser, args.tokenize)

        output = {}
        for text in inputs:
            for name, seg in segmenter_instances.items():
                tokens = seg.tokenize(text)
                print(f"[{name}] {tokens}")
                output.setdefault(name, []).append(tokens)

        # If input was from a .json file, write segmented output to a .json file
        if os.path.isfile(args.tokenize) and args.tokenize.lower().endswith('.json'):
            out_path = args.tokenize[:-len('.json')] + '.tokens.json'
            with open(out_path, 'w', encoding='utf-8') as f:
                json.dump(output, f, ensure_ascii=False, indent=2)
            print(f"Segmented output written to {out_path}")


    # BENCHMARKING STAGE
    if args.benchmark is not None:
        test_inputs = read_inputs(parser, args.benchmark)
        model_names = list(segmenter_instances.keys())
        models = list(segmenter_instances.values())

        if len(models) == 1:
            print(f"Benchmarking {model_names[0]} on {len(test_inputs)} sentence(s)...")
        else:
            print(f"Benchmarking {model_names[0]} vs {' vs '.join(model_names[1:])} on {len(test_inputs)} sentence(s)...")
        benchmarks(
            segmenter=models[0],
            test_corpus=test_inputs,
            reference_segmenters=models[1:],
            compare_only=args.compare
        )
        print()


    # Save resources if requested with --save flag
    if args.save:
        for name, seg in segmenter_instances.items():
            resource_path = os.path.join("resources", args.save, name)
            seg.save_resources(resource_path)
            print(f"Saved dictionary for {name} to {resource_path}")


# Runs the CLI
if __name__ == "__main__":
    main()
