from types import SimpleNamespace

import pytest
from tokenizers.pre_tokenizers import WhitespaceSplit

from wordbreak.utils import Trie
from wordbreak.maxmatch import LongestMatch, ShortestMatch
from wordbreak.benchmarks import (
    avg_tokens_per_sentence,
    benchmarks,
    build_performance,
    compression_rate,
    dictionary_coverage_rate,
    fallback_rate,
    normalized_sequence_length,
    segmentation_performance,
    token_sequence_equivalence,
    zipf_distribution,
)


def test_sentence_level_metrics():
    tokenized = [["ab", "c"], ["d"]]
    assert avg_tokens_per_sentence(tokenized) == 1.5
    assert avg_tokens_per_sentence([]) == 0.0
    assert compression_rate(4, tokenized) == pytest.approx(4 / 3)
    assert normalized_sequence_length(3, 4) == 0.75
    assert normalized_sequence_length(3, 0) == float('inf')


def test_coverage_and_fallback(thai_trie):
    tokenized = [["คุณ", "1", "2"], ["ไป"]]
    # 5 of 7 characters come from dictionary words
    assert dictionary_coverage_rate(thai_trie, tokenized) == pytest.approx(5 / 7 * 100)
    assert fallback_rate(thai_trie, tokenized) == pytest.approx(50.0)
    assert dictionary_coverage_rate(thai_trie, []) == 0.0
    assert fallback_rate(thai_trie, []) == 0.0


def test_token_sequence_equivalence_between_policies():
    trie = Trie(["สวัสดี", "สวัสดีครับ", "ครับ"])
    results = token_sequence_equivalence(LongestMatch(trie), ShortestMatch(trie), ["สวัสดีครับ"])
    total_pos, total_positions, pos_rate, unordered, _, shared, bounds, bound_rate = results
    assert (total_pos, total_positions, pos_rate, unordered) == (0, 1, 0.0, 0)
    # Both end at offset 10, only the shortest policy also breaks at 6
    assert (shared, bounds) == (1, 2)
    assert bound_rate == 50.0


def test_identical_segmenters_fully_agree(thai_trie):
    segmenter = LongestMatch(thai_trie)
    results = token_sequence_equivalence(segmenter, segmenter, ["สวัสดีครับคุณ"])
    assert results[2] == results[4] == results[7] == 100.0


def test_performance_metrics(thai_trie):
    perf = segmentation_performance(LongestMatch(thai_trie), ["คุณไปที่ไหน"])
    assert set(perf) == {"total_time_s", "throughput_tokens_per_s", "avg_latency_s", "peak_memory_mb"}
    assert perf["total_time_s"] >= 0.0

    build = build_performance(["ab", "abc"])
    assert build["num_words"] == 2.0
    assert build["num_nodes"] == 3.0


def test_zipf_distribution():
    assert zipf_distribution([]) == {"slope": 0.0, "intercept": 0.0, "correlation": 0.0}
    fit = zipf_distribution([["a"] * 4 + ["b"] * 2 + ["c"]])
    assert fit["slope"] < 0
    assert fit["correlation"] < 0


def test_benchmarks_prints_report(thai_trie, capsys):
    benchmarks(LongestMatch(thai_trie), ["สวัสดีครับ123"], reference_segmenters=[ShortestMatch(thai_trie)])
    out = capsys.readouterr().out
    assert "=== Dictionary Build Performance for LongestMatch ===" in out
    assert "=== Segmentation Metrics for ShortestMatch ===" in out


def test_benchmarks_compare_only(thai_trie, capsys):
    benchmarks(LongestMatch(thai_trie), ["สวัสดีครับ"], reference_segmenters=[ShortestMatch(thai_trie)], compare_only=True)
    out = capsys.readouterr().out
    assert "Token Sequence Equivalence (LongestMatch vs ShortestMatch)" in out
    assert "Boundary match rate:   100.00% (2/2)" in out


def test_metrics_use_pre_tokenizer(thai_trie):
    hf_tokenizer = SimpleNamespace(backend_tokenizer=SimpleNamespace(pre_tokenizer=WhitespaceSplit()))
    pre_tokenized = LongestMatch(thai_trie, tokenizer=hf_tokenizer)
    plain = LongestMatch(thai_trie)
    # ["คุณ", "ไป"] against ["คุณ", " ", "ไป"]
    assert token_sequence_equivalence(pre_tokenized, plain, ["คุณ ไป"])[:2] == (1, 2)
