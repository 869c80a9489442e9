#!/usr/bin/env python3
"""
Brute-force check of Hnk_Solver counts: h_{n, d(n)-k} straight from the definition

For each n the checker walks every set A of e = d(n) - k generators drawn from
{1, ..., floor((n-1)/2)}, keeps those that are minimal generating sets with n
not in <A>, and compares the total with the enumeration in Hnk_Solver.

Usage:
  python3 Hnk_Checker.py --k 1 --start_n 23 --end_n 40
"""

import argparse
import sys
from functools import reduce

import sympy
from sympy.utilities.iterables import subsets

from Hnk_Solver import count_h, d, threshold


def reachable(gens, limit):
    """reach[x] is True iff x is a non-negative combination of gens, 0 <= x <= limit."""
    reach = [False] * (limit + 1)
    reach[0] = True
    for g in sorted(gens):
        for x in range(g, limit + 1):
            if reach[x - g]:
                reach[x] = True
    return reach


def in_semigroup(x, gens):
    if x < 0:
        return False
    return reachable(gens, x)[x]


def is_minimal_generating_set(gens):
    """No generator is a combination of the others."""
    gens = sorted(gens)
    if not gens:
        return True
    limit = gens[-1]
    reach = [False] * (limit + 1)
    reach[0] = True
    # Only smaller generators can appear in a representation of g.
    for g in gens:
        if reach[g]:
            return False
        for x in range(g, limit + 1):
            if reach[x - g]:
                reach[x] = True
    return True


def brute_force_h(n, e):
    """Count minimal generating sets A, |A| = e, A < n/2, n not in <A>.

    Returns (count, count_gcd_one); the second counts the sets that generate a
    numerical semigroup (gcd 1, finite complement).
    """
    if e < 0:
        return 0, 0
    count = 0
    count_gcd_one = 0
    for A in subsets(range(1, (n - 1) // 2 + 1), e):
        if not is_minimal_generating_set(A):
            continue
        if in_semigroup(n, A):
            continue
        count += 1
        if A and reduce(sympy.igcd, A) == 1:
            count_gcd_one += 1
    return count, count_gcd_one


def check_n(n, k):
    e = d(n) - k
    expected = count_h(n, k)
    brute, brute_gcd_one = brute_force_h(n, e)
    return {
        'n': n,
        'k': k,
        'e': e,
        'enumerated': expected,
        'brute_force': brute,
        'brute_force_gcd_one': brute_gcd_one,
        'ok': expected == brute,
    }


def check_range(k, start_n, end_n, verbose=False):
    """Compare enumeration and brute force for every valid n; return mismatches."""
    errors = []
    for n in range(start_n, end_n + 1):
        if n <= threshold(k, n % 3):
            if verbose:
                print(f"n = {n}: below bound {threshold(k, n % 3)} for k = {k}, skipped")
            continue
        result = check_n(n, k)
        if not result['ok']:
            errors.append(result)
        if verbose:
            if result['ok']:
                print(f"n = {n} e = {result['e']} h = {result['enumerated']} "
                      f"(gcd 1: {result['brute_force_gcd_one']}) ✓")
            else:
                print(f"\n❌ MISMATCH at n = {n}, k = {k}:")
                print(f"   enumeration  = {result['enumerated']}")
                print(f"   brute force  = {result['brute_force']}")
    return errors


def main(argv=None):
    ap = argparse.ArgumentParser(description="Brute-force check of Hnk_Solver counts.")
    ap.add_argument("--k", type=int, default=0)
    ap.add_argument("--start_n", type=int, default=13)
    ap.add_argument("--end_n", type=int, default=30)
    args = ap.parse_args(argv)

    print(f"Checking h_{{n, d(n)-{args.k}}} for n = {args.start_n}..{args.end_n} ...")
    print("=" * 70)

    errors = check_range(args.k, args.start_n, args.end_n, verbose=True)

    print("\n" + "=" * 70)
    if errors:
        print(f"\n⚠️  Found {len(errors)} MISMATCHES:")
        for result in errors:
            print(f"   n={result['n']}: enumerated {result['enumerated']}, "
                  f"brute force {result['brute_force']}")
    else:
        print("\n✓ All enumerated counts match the brute-force count!")

    return len(errors) == 0


if __name__ == '__main__':
    success = main()
    sys.exit(0 if success else 1)
