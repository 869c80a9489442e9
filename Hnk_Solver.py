#!/usr/bin/env python3
# Hnk_Solver.py version 1
"""
h_{n, d(n)-k} enumerator for semigroups with generators bounded by n/2

Purpose
-------
Count h_{n, d(n)-k}: the number of semigroups S whose minimal generating set A
has |A| = e(S) = d(n) - k, every generator below n/2, and n not in S.  For n
large relative to k the count is given by a finite enumeration, and this
program carries that enumeration out exactly.  Tabulating the counts over a
range of n exhibits the quasipolynomial behaviour of the sequence.

Mathematical framework
----------------------
Write n = 3q + b with b = n mod 3.  The top band of candidate generators is

    X_n = { x : n/3 < x < n/2 },      |X_n| = d(n) = floor((n-1)/2) - floor(n/3)

and an element of the band is indexed by its offset t = x - q >= 1.  A semigroup
of embedding dimension d(n) - k keeps all but a few elements of the band and adds
a handful of small generators q + a with a <= 0.  The offsets a form a set I
drawn from the outer range {p(k, b), ..., 0} (or ..., -1 when b = 0) where

    p(k, b) = -2k - 1 + b.

Every small generator forces some band offsets out (their sum with other
generators would hit n):

    A(I) = { b - 2a }                  (q+a) + (q+a) + (q+t) = n
    B(I) = { (b - a)/2 }  if b-a even   (q+a) + 2(q+t) = n
    C(I) = { b - a - a' } for a < a'    (q+a) + (q+a') + (q+t) = n

R = A(I) ∪ B(I) ∪ C(I).  The deficiency l = |R| - |I| is what the branch has
already spent of the budget k.  Offsets x, y with x + y = b - a are each
allowed, but not both: every such pair outside R must be hit by the set F of
extra removals ("fixation").  Removals beyond the window {1, ..., b - 2 min I}
are free, so a feasible (I, F) contributes

    binom(d(n) - |window|, k - l - |F|).

Completeness guarantee
----------------------
The structure theorem is stated for n > 24k + 12 - 8b: there every semigroup
counted by h_{n, d(n)-k} arises from exactly one (I, F) pair, so the fold over
both powersets is the count.  Below that bound the program refuses to run.
Hnk_Checker.py recounts small cases straight from the definition.

How to run
----------
1) Single value:
       python3 Hnk_Solver.py 61 2
2) Table of h over a range of n with counters:
       python3 Hnk_Solver.py 61 2 --end_n 80 --debug
3) Machine-readable output:
       python3 Hnk_Solver.py 61 2 --json

Use --version to print a machine-readable environment/version block.

Version 1
---------
* Exact enumeration over Powerset(outer range) x Powerset(R_c)
* Arbitrary-precision counts and binomials (Python int)
* Powerset size guard (--max_bits) instead of silent bitmask overflow
* Empty I handled explicitly: empty window, contributes binom(d(n), k)
* --end_n sweep, --json summary, --debug counters, --assertions checks
"""

from __future__ import annotations

import argparse
import hashlib
import json
import os
import platform
import subprocess
import sys
import time
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from importlib import metadata
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Set, Tuple

# Counts grow past the default int->str digit limit for large k.
try:
    sys.set_int_max_str_digits(0)
except AttributeError:
    pass


program_name, program_version = "Hnk_Solver", 1


# ----------------------------- switches (set by args) -----------------------------
DEBUG = False
ASSERTIONS = False

# Largest set whose powerset we agree to walk.  2^48 codes is far beyond any run
# that finishes; the guard exists so an oversized range fails immediately.
MAX_SUBSET_BITS = 48


# ----------------------------- errors -----------------------------
class HnkError(Exception):
    """Base class for errors reported to the user by main()."""


class UsageError(HnkError):
    pass


class DomainPreconditionError(HnkError, ValueError):
    """n is not above 24k + 12 - 8b, so the enumeration is not exhaustive."""


class RangeTooLargeError(HnkError, ValueError):
    pass


# ----------------------------- small utilities -----------------------------
def utc_now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def sha256_file(path: str) -> str:
    h = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(1 << 20), b""):
            h.update(chunk)
    return h.hexdigest()


def get_git_commit() -> Optional[str]:
    # Best effort: if this file is inside a git repo, return HEAD commit hash.
    try:
        r = subprocess.run(
            ["git", "rev-parse", "HEAD"],
            capture_output=True,
            text=True,
            check=True,
            cwd=os.path.dirname(os.path.abspath(__file__)),
        )
        s = (r.stdout or "").strip()
        return s if s else None
    except (OSError, subprocess.CalledProcessError):
        return None


def get_package_version(dist: str) -> Optional[str]:
    try:
        return metadata.version(dist)
    except metadata.PackageNotFoundError:
        return None


def env_block(script_path: str, argv: List[str]) -> Dict[str, object]:
    return {
        "program": program_name,
        "program_version": program_version,
        "script_path": os.path.abspath(script_path),
        "script_sha256": sha256_file(script_path),
        "git_commit": get_git_commit(),
        "command_line": " ".join(argv),
        "python_version": sys.version.replace("\n", " "),
        "platform": platform.platform(),
        "sympy_version": get_package_version("sympy"),
    }


# ----------------------------- combinatorial primitives -----------------------------
def binom(n: int, k: int) -> int:
    """Exact binomial coefficient C(n, k); 0 when k > n or k < 0."""
    if k > n or k < 0:
        return 0
    k = min(k, n - k)
    if k == 0:
        return 1
    result = n
    for i in range(2, k + 1):
        # result is C(n, i-1); C(n, i-1) * (n-i+1) == i * C(n, i), so // is exact.
        result = result * (n - i + 1) // i
    return result


def d(n: int) -> int:
    """Size of the band X_n = (n/3, n/2)."""
    return (n - 1) // 2 - n // 3


def p(k: int, b: int) -> int:
    """Lower end of the outer range of offsets."""
    return -2 * k - 1 + b


def threshold(k: int, b: int) -> int:
    return 24 * k + 12 - 8 * b


def validate_input(n: int, k: int) -> None:
    if k < 0:
        raise DomainPreconditionError(f"k must be non-negative, got k = {k}")
    bound = threshold(k, n % 3)
    if n <= bound:
        raise DomainPreconditionError(
            f"n must be strictly greater than {bound} for k = {k} (got n = {n})"
        )


# ----------------------------- subset codec -----------------------------
def decode_subset(S: Iterable[int], code: int) -> Set[int]:
    """Return the subset of S selected by the bits of code.

    Bit i of code (least significant first) selects the i-th smallest element
    of S.  If code is 0b1011 and S = {x1 < x2 < x3 < x4} the result is
    {x1, x2, x4}.
    """
    out: Set[int] = set()
    for i, x in enumerate(sorted(S)):
        if (code >> i) & 1:
            out.add(x)
    return out


def powerset(S: Iterable[int], max_bits: int = MAX_SUBSET_BITS) -> Iterator[Set[int]]:
    elems = sorted(S)
    if len(elems) > max_bits:
        raise RangeTooLargeError(
            f"refusing to enumerate 2^{len(elems)} subsets (max_bits={max_bits})"
        )
    for code in range(1 << len(elems)):
        yield decode_subset(elems, code)


# ----------------------------- derived sets -----------------------------
def build_exclusion_set(I: Iterable[int], b: int) -> Set[int]:
    """R = A(I) ∪ B(I) ∪ C(I), rebuilt from scratch for every branch."""
    elems = sorted(I)
    R: Set[int] = set()
    for idx, a in enumerate(elems):
        R.add(b - 2 * a)                    # A(I)
        if (b - a) % 2 == 0:
            R.add((b - a) // 2)             # B(I)
        for a2 in elems[idx + 1:]:
            R.add(b - a - a2)               # C(I)
    return R


def deficiency(I: Iterable[int], R: Iterable[int]) -> int:
    return len(set(R)) - len(set(I))


def build_pairs(I: Iterable[int], R: Set[int], b: int) -> List[Tuple[int, int]]:
    """Pairs (x, b-a-x), x < b-a-x, with both members outside R.

    A fixation must contain at least one member of every pair.
    """
    pairs: List[Tuple[int, int]] = []
    for a in sorted(I):
        s = b - a
        x = 1
        while x < s - x:
            if x not in R and (s - x) not in R:
                pairs.append((x, s - x))
            x += 1
    return pairs


def is_valid_fixation(pairs: Iterable[Tuple[int, int]], fixation: Set[int]) -> bool:
    for x, y in pairs:
        if x not in fixation and y not in fixation:
            return False
    return True


def generate_removing_range(b: int, m: int) -> Set[int]:
    """The window {1, ..., b - 2m}; empty when b - 2m < 1."""
    return set(range(1, b - 2 * m + 1))


def window_for(I: Set[int], b: int) -> Set[int]:
    # No small generators means no constrained offsets.
    if not I:
        return set()
    return generate_removing_range(b, min(I))


# ----------------------------- enumeration -----------------------------
@dataclass
class EnumerationStats:
    outer_subsets: int = 0
    pruned_deficiency: int = 0
    fixations_tried: int = 0
    fixations_over_budget: int = 0
    fixations_unhit: int = 0
    contributing: int = 0


@dataclass(frozen=True)
class HnkResult:
    n: int
    k: int
    b: int
    d_n: int
    embedding_dimension: int
    generator_bound: int
    outer_range: Tuple[int, ...]
    count: int
    runtime_sec: float
    stats: EnumerationStats = field(default_factory=EnumerationStats)

    def summary(self) -> Dict[str, object]:
        out = asdict(self)
        out["outer_range"] = list(self.outer_range)
        out["h_label"] = f"h_{{{self.n}, {self.embedding_dimension}}}"
        return out


def count_branch(
    I: Set[int],
    b: int,
    n: int,
    k: int,
    count: int,
    stats: Optional[EnumerationStats] = None,
    max_bits: int = MAX_SUBSET_BITS,
) -> int:
    """Add the contribution of one candidate I to count and return the total."""
    if stats is None:
        stats = EnumerationStats()

    R = build_exclusion_set(I, b)
    l = deficiency(I, R)
    if ASSERTIONS and l < 0:
        raise AssertionError(f"negative deficiency l={l} for I={sorted(I)}")
    if l > k:
        stats.pruned_deficiency += 1
        return count

    pairs = build_pairs(I, R, b)
    xn = window_for(I, b)
    R_c = xn - R
    free = d(n) - len(xn)

    for fixation in powerset(R_c, max_bits=max_bits):
        stats.fixations_tried += 1
        l_ = l + len(fixation)
        if l_ > k:
            stats.fixations_over_budget += 1
            continue
        if not is_valid_fixation(pairs, fixation):
            stats.fixations_unhit += 1
            continue
        term = binom(free, k - l_)
        if ASSERTIONS:
            assert fixation <= R_c, (sorted(fixation), sorted(R_c))
            assert term >= 0, term
        stats.contributing += 1
        count += term
    return count


def outer_range(n: int, k: int) -> FrozenSet[int]:
    top = -1 if n % 3 == 0 else 0
    return frozenset(range(p(k, n % 3), top + 1))


def enumerate_h(
    n: int,
    k: int,
    max_bits: int = MAX_SUBSET_BITS,
    validate: bool = True,
) -> HnkResult:
    """Fold count_branch over Powerset(outer range) and return the result."""
    if validate:
        validate_input(n, k)
    b = n % 3
    rng = outer_range(n, k)
    stats = EnumerationStats()
    count = 0

    t0 = time.time()
    for I in powerset(rng, max_bits=max_bits):
        stats.outer_subsets += 1
        count = count_branch(I, b, n, k, count, stats=stats, max_bits=max_bits)
    runtime = time.time() - t0

    return HnkResult(
        n=n,
        k=k,
        b=b,
        d_n=d(n),
        embedding_dimension=d(n) - k,
        generator_bound=n // 2,
        outer_range=tuple(sorted(rng)),
        count=count,
        runtime_sec=runtime,
        stats=stats,
    )


def count_h(n: int, k: int, max_bits: int = MAX_SUBSET_BITS) -> int:
    return enumerate_h(n, k, max_bits=max_bits).count


# ----------------------------- reporting -----------------------------
def format_result(res: HnkResult) -> str:
    e = res.embedding_dimension
    return (
        f"There are {res.count} numerical semigroups of embedding dimension {e} "
        f"with minimal generating set bounded above by {res.generator_bound} "
        f"such that {res.n} is not in the semigroup, i.e.\n"
        f"h_{{{res.n}, {e}}} = {res.count}"
    )


def format_stats(res: HnkResult) -> str:
    s = res.stats
    return (
        f"[debug] n={res.n} k={res.k} outer_range={list(res.outer_range)} "
        f"outer_subsets={s.outer_subsets} pruned_deficiency={s.pruned_deficiency} "
        f"fixations_tried={s.fixations_tried} over_budget={s.fixations_over_budget} "
        f"unhit={s.fixations_unhit} contributing={s.contributing}"
    )


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    ap = _ArgumentParser(
        prog=program_name,
        description="Hnk_Solver: count h_{n, d(n)-k} by exhaustive enumeration.",
    )
    ap.add_argument("n", nargs="?", type=int, help="integer n (n not in the semigroup)")
    ap.add_argument("k", nargs="?", type=int, help="embedding dimension deficit k >= 0")
    ap.add_argument("--version", action="store_true",
                    help="Print version/environment info and exit")
    ap.add_argument("--end_n", type=int, default=None,
                    help="Sweep n..end_n (inclusive) with the same k.")
    ap.add_argument("--json", action="store_true",
                    help="Print a JSON summary instead of the prose result.")
    ap.add_argument("--max_bits", type=int, default=MAX_SUBSET_BITS,
                    help=f"Largest set size whose powerset is walked (default {MAX_SUBSET_BITS}).")
    ap.add_argument("--debug", action="store_true")
    ap.add_argument("--assertions", action="store_true")
    return ap


USAGE_MESSAGE = "Error: must supply at least 2 arguments: n and k."


def main(argv: Optional[List[str]] = None) -> int:
    global DEBUG, ASSERTIONS

    if argv is None:
        argv = sys.argv[1:]
    ap = build_parser()
    try:
        # Anything after n and k is ignored.
        args, _ = ap.parse_known_args(argv)
    except UsageError as e:
        print(f"[!] {e}")
        print(ap.format_usage().rstrip())
        return 1

    if args.version:
        info = env_block(__file__, [program_name] + list(argv))
        print(json.dumps(info, indent=2, sort_keys=True))
        return 0

    if args.n is None or args.k is None:
        print(USAGE_MESSAGE)
        print(ap.format_usage().rstrip())
        return 1

    DEBUG = bool(args.debug)
    ASSERTIONS = bool(args.assertions)

    end_n = args.end_n if args.end_n is not None else args.n
    ns = list(range(args.n, end_n + 1))
    try:
        if not ns:
            raise UsageError(f"--end_n ({end_n}) must be >= n ({args.n})")
        for m in ns:
            validate_input(m, args.k)
    except HnkError as e:
        print(f"Error: {e}")
        return 1

    sweep = len(ns) > 1 or args.end_n is not None
    if sweep and not args.json:
        print(f"[+] {program_name} v{program_version}")
        print(f"[+] k={args.k} n range: {ns[0]}..{ns[-1]}")
        print(f"[+] debug={DEBUG} assertions={ASSERTIONS}")
        print(f"[+] start time (UTC): {utc_now_iso()}\n")

    results: List[HnkResult] = []
    try:
        for m in ns:
            res = enumerate_h(m, args.k, max_bits=args.max_bits, validate=False)
            results.append(res)
            if args.json:
                continue
            if sweep:
                print(
                    f"[>] n={m} b={res.b} d(n)={res.d_n} "
                    f"h_{{{m}, {res.embedding_dimension}}}={res.count} "
                    f"runtime={res.runtime_sec * 1000:.3f} ms"
                )
            else:
                print(format_result(res))
                print(f"{res.runtime_sec * 1000:.3f}ms to run.")
            if DEBUG:
                print(format_stats(res))
    except HnkError as e:
        print(f"[!] Error: {e}")
        return 1

    if args.json:
        payload: object = [r.summary() for r in results] if sweep else results[0].summary()
        print(json.dumps(payload, indent=2, sort_keys=True))
    elif sweep:
        print(f"\n[+] Finished. End time (UTC): {utc_now_iso()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
