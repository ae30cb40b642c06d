"""
Various benchmarks to evaluate dictionary segmenters:

1.  avg_tokens_per_sentence:
       Compute the average number of tokens per sentence.
2.  compression_rate:
       Determine the average number of characters per token.
3.  normalized_sequence_length:
       Compute the ratio of the segmenter's sequence length to a baseline where each character is treated as an individual token.
4.  dictionary_coverage_rate:
       Percentage of characters that fall inside dictionary words.
5.  fallback_rate:
       Percentage of tokens that are fallback fragments rather than dictionary words.
6.  token_sequence_equivalence:
       Compare two segmenters on positional agreement, token overlap, and shared word boundaries.
7.  segmentation_performance:
       Evaluate segmentation speed, latency, and memory usage.
8.  build_performance:
       Measure trie build time, memory usage, word and node counts.
9.  zipf_distribution:
       Assess how closely token frequency follows Zipf's law.
10. benchmarks:
       Run all benchmarks and print a summary of results to the console.
"""

import math
import tracemalloc
from timeit import default_timer as timer
from collections import Counter
from typing import List, Tuple, Dict, Any, Iterable, Set

from wordbreak.utils import Trie


def avg_tokens_per_sentence(tokenized_sents: List[List[str]]) -> float:
    """
    Compute the average number of tokens per sentence from pre-tokenized data.
    Args:
        tokenized_sents (List[List[str]]): List of tokenized sentences.
    Returns:
        float: Average number of tokens per sentence.
    """
    if not tokenized_sents:
        return 0.0
    return sum(len(ts) for ts in tokenized_sents) / len(tokenized_sents)


def normalized_sequence_length(total_tokens: int, total_chars: int) -> float:
    """
    Compute normalized sequence length: total tokens divided by total characters.
    Args:
        total_tokens (int): Total number of tokens.
        total_chars (int): Total number of characters.
    Returns:
        float: Total tokens divided by total characters.
    """
    return total_tokens / total_chars if total_chars else float('inf')


def compression_rate(total_chars: int, tokenized_sents: List[List[str]]) -> float:
    """
    Compute the compression rate: ratio of total characters to total number of tokens.
    Args:
        total_chars (int): Total number of characters.
        tokenized_sents (List[List[str]]): List of tokenized sentences.
    Returns:
        float: Compression rate (characters per token).
    """
    total_tokens = sum(len(ts) for ts in tokenized_sents)
    return total_chars / total_tokens if total_tokens else float('inf')


def dictionary_coverage_rate(trie: Trie, tokenized_sents: List[List[str]]) -> float:
    """
    Compute the share of characters that belong to dictionary tokens.
    Args:
        trie (Trie): The dictionary the tokens were produced with.
        tokenized_sents (List[List[str]]): List of tokenized sentences.
    Returns:
        float: Percentage of characters covered by dictionary words.
    """
    total_chars = sum(len(tok) for ts in tokenized_sents for tok in ts)
    if not total_chars:
        return 0.0
    covered = sum(len(tok) for ts in tokenized_sents for tok in ts if tok in trie)
    return covered / total_chars * 100


def fallback_rate(trie: Trie, tokenized_sents: List[List[str]]) -> float:
    """
    Compute the share of tokens that are not dictionary words.
    Args:
        trie (Trie): The dictionary the tokens were produced with.
        tokenized_sents (List[List[str]]): List of tokenized sentences.
    Returns:
        float: Percentage of fallback tokens.
    """
    total_tokens = sum(len(ts) for ts in tokenized_sents)
    if not total_tokens:
        return 0.0
    fallbacks = sum(1 for ts in tokenized_sents for tok in ts if tok not in trie)
    return fallbacks / total_tokens * 100


def _boundaries(tokens: List[str]) -> Set[int]:
    """Character offsets at which a token ends."""
    offsets = set()
    position = 0
    for token in tokens:
        position += len(token)
        offsets.add(position)
    return offsets


def token_sequence_equivalence(
    segmenter1: Any,
    segmenter2: Any,
    input: List[str]
) -> Tuple[int, int, float, int, float, int, int, float]:
    """
    Compute equivalence metrics between two segmenters over a list of input.

    Args:
        segmenter1 (Any): First segmenter with a `tokenize` method.
        segmenter2 (Any): Second segmenter with a `tokenize` method.
        input (List[str]): List of input sentences.

    Returns:
        Tuple containing:
            total_pos_matches (int): Tokens matching at the same position.
            total_positions (int): Total positions compared.
            positional_rate (float): Percentage of positional matches.
            total_unordered_matches (int): Tokens matching regardless of position.
            unordered_rate (float): Percentage of unordered matches.
            total_shared_boundaries (int): Word boundaries placed by both segmenters.
            total_boundaries (int): Word boundaries placed by either segmenter.
            boundary_rate (float): Percentage of shared boundaries.
    """

    # 1. Initialize counters for all metrics
    total_pos_matches = 0
    total_positions = 0
    total_unordered_matches = 0
    total_shared_boundaries = 0
    total_boundaries = 0

    # 2. Iterate through each sentence in the input
    for sentence in input:
        tokens1 = segmenter1.tokenize(sentence)
        tokens2 = segmenter2.tokenize(sentence)

        # 2.1 Compare tokens at same positions (positional matches)
        n = min(len(tokens1), len(tokens2))
        total_pos_matches += sum(1 for i in range(n) if tokens1[i] == tokens2[i])
        total_positions += n

        # 2.2 Compare unordered token overlap (regardless of position)
        freq1 = Counter(tokens1)
        freq2 = Counter(tokens2)
        total_unordered_matches += sum(min(freq1[token], freq2[token]) for token in (freq1.keys() & freq2.keys()))

        # 2.3 Compare the character offsets where tokens end
        bounds1 = _boundaries(tokens1)
        bounds2 = _boundaries(tokens2)
        total_shared_boundaries += len(bounds1 & bounds2)
        total_boundaries += len(bounds1 | bounds2)

    # 3. Compute rates as percentages
    positional_rate = (total_pos_matches / total_positions * 100) if total_positions else 0.0
    unordered_rate = (total_unordered_matches / total_positions * 100) if total_positions else 0.0
    boundary_rate = (total_shared_boundaries / total_boundaries * 100) if total_boundaries else 0.0

    return (
        total_pos_matches,
        total_positions,
        positional_rate,
        total_unordered_matches,
        unordered_rate,
        total_shared_boundaries,
        total_boundaries,
        boundary_rate
    )


def segmentation_performance(segmenter: Any, input: List[str]) -> Dict[str, float]:
    """
    Measure segmentation speed and memory usage for a segmenter over input.

    Args:
        segmenter (Any): Segmenter with a `tokenize` method.
        input (List[str]): List of input sentences.

    Returns:
        Dict[str, float]: Metrics including total time, throughput, average latency, and peak memory in MB.
    """
    tracemalloc.start()
    start_time = timer()
    all_tokens = [segmenter.tokenize(sentence) for sentence in input]
    end_time = timer()
    _, peak = tracemalloc.get_traced_memory()
    tracemalloc.stop()

    total_time = end_time - start_time
    total_tokens = sum(len(tokens_in_sentence) for tokens_in_sentence in all_tokens)
    throughput = total_tokens / total_time if total_time > 0 else float('inf')
    avg_latency = total_time / len(input) if input else 0.0

    return {
        "total_time_s": total_time,
        "throughput_tokens_per_s": throughput,
        "avg_latency_s": avg_latency,
        "peak_memory_mb": peak / (1024 ** 2),
    }


def build_performance(words: Iterable[str]) -> Dict[str, float]:
    """
    Measure trie construction speed and memory usage.

    Args:
        words (Iterable[str]): Dictionary words to insert.

    Returns:
        Dict[str, float]: Metrics including build time, peak memory in MB, number of words and nodes.
    """
    tracemalloc.start()
    start_time = timer()
    trie = Trie(words)
    end_time = timer()
    _, peak = tracemalloc.get_traced_memory()
    tracemalloc.stop()

    return {
        "build_time_s": end_time - start_time,
        "peak_memory_mb": peak / (1024 ** 2),
        "num_words": float(len(trie)),
        "num_nodes": float(trie.node_count),
    }


def zipf_distribution(tokenized_sents: List[List[str]]) -> Dict[str, float]:
    """
    Analyze token frequency distribution and compute Zipf's law fit from pre-tokenized sentences.
    Args:
        tokenized_sents (List[List[str]]): List of tokenized sentences.
    Returns:
        Dict[str, float]: Contains 'slope', 'intercept', and 'correlation' of the log-log fit.
    """
    all_tokens = [tok for seq in tokenized_sents for tok in seq]
    if not all_tokens:
        return {"slope": 0.0, "intercept": 0.0, "correlation": 0.0}
    frequency = Counter(all_tokens)
    frequency_sorted = [count for _, count in frequency.most_common()]
    ranks = list(range(1, len(frequency_sorted) + 1))
    log_ranks = [math.log(r) for r in ranks]
    log_freqs = [math.log(f) for f in frequency_sorted]
    n = len(ranks)
    mean_x = sum(log_ranks) / n
    mean_y = sum(log_freqs) / n
    cov = sum((x - mean_x) * (y - mean_y) for x, y in zip(log_ranks, log_freqs))
    var_x = sum((x - mean_x) ** 2 for x in log_ranks)
    var_y = sum((y - mean_y) ** 2 for y in log_freqs)
    slope = cov / var_x if var_x else 0.0
    intercept = mean_y - slope * mean_x
    correlation = cov / math.sqrt(var_x * var_y) if var_x and var_y else 0.0
    return {"slope": slope, "intercept": intercept, "correlation": correlation}


def _print_segmentation_metrics(segmenter: Any, test_corpus: List[str]) -> None:
    name = segmenter.__class__.__name__
    tokenized_sents = [segmenter.tokenize(s) for s in test_corpus]
    total_chars = sum(len(s) for s in test_corpus)
    total_tokens = sum(len(ts) for ts in tokenized_sents)

    print(f"=== Segmentation Metrics for {name} ===")
    print(f"Average tokens per sentence:        {avg_tokens_per_sentence(tokenized_sents):.2f}")
    print(f"Compression rate (chars per token): {compression_rate(total_chars, tokenized_sents):.2f}")
    print(f"Normalized sequence length:         {normalized_sequence_length(total_tokens, total_chars):.4f}")
    print(f"Dictionary coverage rate:           {dictionary_coverage_rate(segmenter.trie, tokenized_sents):.2f}%")
    print(f"Fallback token rate:                {fallback_rate(segmenter.trie, tokenized_sents):.2f}%")

    print("\n=== Segmentation Performance ===")
    perf = segmentation_performance(segmenter, test_corpus)
    print(f"Total time:     {perf['total_time_s']:.4f}s")
    print(f"Throughput:     {perf['throughput_tokens_per_s']:.2f} tokens/s")
    print(f"Avg. latency:   {perf['avg_latency_s']:.6f}s per sentence")
    print(f"Peak memory:    {perf['peak_memory_mb']:.2f} MB")

    print("\n=== Zipf Distribution Fit ===")
    zipf_res = zipf_distribution(tokenized_sents)
    print(f"Slope:          {zipf_res['slope']:.4f}")
    print(f"Intercept:      {zipf_res['intercept']:.4f}")
    print(f"Correlation:    {zipf_res['correlation']:.4f}")


def benchmarks(
    segmenter: Any,
    test_corpus: List[str],
    reference_segmenters: List[Any] = [],
    compare_only: bool = False
) -> None:
    """
    Run all benchmark functions and print results to the console.

    Args:
        segmenter (Any): Segmenter with a `tokenize` method and a `trie`.
        test_corpus (List[str]): List of input sentences.
        reference_segmenters (List[Any], optional): Additional segmenters for equivalence and comparison metrics.
        compare_only (bool): Only print token-sequence equivalence against the reference segmenters.
    """
    name1 = segmenter.__class__.__name__

    if compare_only:
        if not reference_segmenters:
            print("No reference segmenters provided for comparison.")
            return
        for other in reference_segmenters:
            name2 = other.__class__.__name__
            (
                total_pos, total_positions, pos_rate,
                total_unord, unord_rate,
                total_shared, total_bounds, bound_rate
            ) = token_sequence_equivalence(segmenter, other, test_corpus)
            print(f"=== Token Sequence Equivalence ({name1} vs {name2}) ===")
            print(f"Positional match rate: {pos_rate:.2f}% ({total_pos}/{total_positions})")
            print(f"Unordered match rate:  {unord_rate:.2f}% ({total_unord}/{total_positions})")
            print(f"Boundary match rate:   {bound_rate:.2f}% ({total_shared}/{total_bounds})")
        return

    print(f"=== Dictionary Build Performance for {name1} ===")
    build = build_performance(segmenter.trie.words())
    print(f"Build time:     {build['build_time_s']:.4f}s")
    print(f"Peak memory:    {build['peak_memory_mb']:.2f} MB")
    print(f"Num. words:     {int(build['num_words'])}")
    print(f"Num. nodes:     {int(build['num_nodes'])}")
    print()

    _print_segmentation_metrics(segmenter, test_corpus)
    for other in reference_segmenters:
        print()
        _print_segmentation_metrics(other, test_corpus)
