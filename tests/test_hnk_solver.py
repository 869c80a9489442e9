#!/usr/bin/env python3
"""
Hnk_Solver - unit and end-to-end tests

Small counts below were worked out by hand from the definition of
h_{n, d(n)-k} and agree with the brute-force checker.
"""

import json
import subprocess
import sys
from itertools import combinations
from pathlib import Path

import pytest
import sympy

import Hnk_Solver as hs
from Hnk_Solver import (
    DomainPreconditionError,
    EnumerationStats,
    RangeTooLargeError,
    binom,
    build_exclusion_set,
    build_pairs,
    count_branch,
    count_h,
    d,
    decode_subset,
    deficiency,
    enumerate_h,
    generate_removing_range,
    is_valid_fixation,
    main,
    outer_range,
    p,
    powerset,
    validate_input,
)

ROOT = Path(__file__).parent.parent


# ----------------------------- primitives -----------------------------
def test_binom_literals():
    assert binom(5, 2) == 10
    assert binom(6, 3) == 20
    assert binom(0, 0) == 1
    assert binom(4, 5) == 0
    assert binom(7, 0) == 1
    assert binom(3, -1) == 0


def test_binom_symmetry_and_sympy():
    for n in range(0, 25):
        for k in range(0, n + 1):
            assert binom(n, k) == binom(n, n - k)
            assert binom(n, k) == sympy.binomial(n, k), (n, k)


def test_binom_beyond_64_bits():
    val = binom(100, 50)
    assert val == sympy.binomial(100, 50)
    assert val > 2 ** 64


def test_d_and_p():
    assert d(25) == 4
    assert d(13) == 2
    assert d(15) == 2
    assert d(23) == 4
    assert p(1, 2) == -1
    assert p(0, 1) == 0


# ----------------------------- subset codec -----------------------------
def test_decode_subset_literal():
    assert decode_subset({2, 5, 9}, 5) == {2, 9}
    assert decode_subset({2, 5, 9}, 0) == set()
    assert decode_subset({2, 5, 9}, 7) == {2, 5, 9}


def test_decode_subset_is_a_bijection():
    S = {-4, -3, -2, -1, 0}
    seen = [frozenset(decode_subset(S, code)) for code in range(1 << len(S))]
    assert len(set(seen)) == 2 ** len(S)

    every = {frozenset(c) for r in range(len(S) + 1) for c in combinations(sorted(S), r)}
    assert set(seen) == every


def test_powerset_guard():
    with pytest.raises(RangeTooLargeError):
        list(powerset(range(10), max_bits=4))
    assert list(powerset([])) == [set()]


# ----------------------------- derived sets -----------------------------
def test_generate_removing_range():
    assert generate_removing_range(10, 2) == {1, 2, 3, 4, 5, 6}
    assert generate_removing_range(1, 1) == set()


def test_build_exclusion_set_families():
    # a=-1: A -> 4, B skipped (3 odd), C with 0 -> 3;  a=0: A -> 2, B -> 1
    assert build_exclusion_set({-1, 0}, 2) == {1, 2, 3, 4}
    assert build_exclusion_set({0}, 1) == {1}
    assert build_exclusion_set(set(), 2) == set()


def test_deficiency():
    R = build_exclusion_set({-1, 0}, 2)
    assert deficiency({-1, 0}, R) == 2
    assert deficiency({-1}, build_exclusion_set({-1}, 2)) == 0


def test_build_pairs():
    assert build_pairs({-1}, {4}, 2) == [(1, 2)]
    # both members must lie outside R
    assert build_pairs({-1}, {2, 4}, 2) == []
    assert build_pairs({-3}, set(), 1) == [(1, 3)]
    assert build_pairs({-4}, set(), 1) == [(1, 4), (2, 3)]


def test_is_valid_fixation():
    pairs = [(1, 4), (2, 3)]
    assert is_valid_fixation(pairs, {3, 4})
    assert not is_valid_fixation(pairs, {5})
    assert is_valid_fixation([], set())


# ----------------------------- enumeration -----------------------------
def test_empty_candidate_contributes_binom_d_k():
    stats = EnumerationStats()
    total = count_branch(set(), 1, 40, 1, 0, stats=stats)
    assert total == binom(d(40), 1) == 6
    assert stats.fixations_tried == 1
    assert stats.contributing == 1


def test_count_branch_threads_the_running_count():
    # I = {-1}, n = 23: fixations {1} and {2} each add binom(0, 0)
    assert count_branch({-1}, 2, 23, 1, 100) == 102


def test_count_branch_prunes_on_deficiency():
    stats = EnumerationStats()
    assert count_branch({-1, 0}, 2, 23, 1, 5, stats=stats) == 5
    assert stats.pruned_deficiency == 1
    assert stats.fixations_tried == 0


@pytest.mark.parametrize("n,k,expected", [
    (13, 0, 2),
    (14, 0, 1),
    (15, 0, 2),
    (23, 1, 7),
])
def test_small_counts(n, k, expected):
    assert count_h(n, k) == expected


def test_outer_range():
    assert outer_range(23, 1) == frozenset({-1, 0})
    assert outer_range(15, 0) == frozenset({-1})
    assert outer_range(14, 0) == frozenset()


def test_enumerate_h_result_fields():
    res = enumerate_h(61, 2)
    assert res.b == 1
    assert res.d_n == d(61)
    assert res.embedding_dimension == d(61) - 2
    assert res.generator_bound == 30
    assert res.outer_range == (-4, -3, -2, -1, 0)
    assert res.stats.outer_subsets == 2 ** 5
    assert res.count >= 0
    assert res.summary()["h_label"] == f"h_{{61, {d(61) - 2}}}"


def test_enumeration_is_deterministic():
    assert enumerate_h(61, 2).count == enumerate_h(61, 2).count


@pytest.mark.parametrize("n,k", [(13, 0), (40, 1), (41, 1), (42, 1), (70, 2)])
def test_counts_are_non_negative_ints(n, k):
    c = count_h(n, k)
    assert isinstance(c, int)
    assert c >= 0


def test_validate_input():
    with pytest.raises(DomainPreconditionError, match="124"):
        validate_input(1, 5)
    with pytest.raises(DomainPreconditionError):
        validate_input(20, 1)
    with pytest.raises(DomainPreconditionError):
        validate_input(30, -1)
    validate_input(23, 1)


def test_enumerate_h_respects_bit_bound():
    with pytest.raises(RangeTooLargeError):
        enumerate_h(23, 1, max_bits=1)


def test_assertions_mode_does_not_change_count(monkeypatch):
    monkeypatch.setattr(hs, "ASSERTIONS", True)
    assert count_h(23, 1) == 7


# ----------------------------- CLI -----------------------------
def test_cli_success(capsys):
    assert main(["13", "0"]) == 0
    out = capsys.readouterr().out
    assert "h_{13, 2} = 2" in out
    assert "There are 2 numerical semigroups of embedding dimension 2" in out
    assert "ms to run." in out


def test_cli_ignores_extra_arguments(capsys):
    assert main(["13", "0", "whatever", "else"]) == 0
    assert "h_{13, 2} = 2" in capsys.readouterr().out


def test_cli_ignores_unknown_options(capsys):
    assert main(["13", "0", "--foo"]) == 0
    assert "h_{13, 2} = 2" in capsys.readouterr().out
    assert main(["13", "0", "--debug", "extra"]) == 0
    out = capsys.readouterr().out
    assert "h_{13, 2} = 2" in out
    assert "[debug]" in out


def test_cli_usage_error(capsys):
    assert main(["13"]) == 1
    assert "at least 2 arguments" in capsys.readouterr().out
    assert main([]) == 1
    assert "at least 2 arguments" in capsys.readouterr().out


def test_cli_non_integer_argument(capsys):
    assert main(["abc", "1"]) == 1
    out = capsys.readouterr().out
    assert "invalid int value" in out
    assert "at least 2 arguments" not in out


def test_cli_rejects_small_n(capsys, monkeypatch):
    calls = []
    monkeypatch.setattr(hs, "enumerate_h", lambda *a, **kw: calls.append(a))
    assert main(["1", "5"]) == 1
    out = capsys.readouterr().out
    assert "124" in out
    assert calls == []


def test_cli_json_sweep(capsys):
    assert main(["13", "0", "--end_n", "15", "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert [row["count"] for row in payload] == [2, 1, 2]
    assert [row["n"] for row in payload] == [13, 14, 15]


def test_cli_sweep_and_debug(capsys):
    assert main(["13", "0", "--end_n", "14", "--debug"]) == 0
    out = capsys.readouterr().out
    assert "[>] n=13" in out
    assert "[>] n=14" in out
    assert "[debug]" in out


def test_cli_version(capsys):
    assert main(["--version"]) == 0
    info = json.loads(capsys.readouterr().out)
    assert info["program"] == "Hnk_Solver"
    assert len(info["script_sha256"]) == 64


def test_script_exit_codes():
    script = str(ROOT / "Hnk_Solver.py")
    r = subprocess.run([sys.executable, script, "13"], capture_output=True, text=True)
    assert r.returncode == 1
    assert "at least 2 arguments" in r.stdout

    r = subprocess.run([sys.executable, script, "1", "5"], capture_output=True, text=True)
    assert r.returncode == 1

    r = subprocess.run([sys.executable, script, "23", "1"], capture_output=True, text=True)
    assert r.returncode == 0
    assert "h_{23, 3} = 7" in r.stdout
