# main.py

import argparse
import logging
import sys
import time

import numpy as np

from possibilities import ContradictionError
from sudoku import (
    SolverConfig,
    apply_logging,
    parse_puzzle,
    prepare,
    solve_with_config,
    sudoku_board_string,
)

# A 17-clue puzzle with a unique solution.
BENCH_PUZZLE = np.array([
    [0, 0, 0, 0, 0, 0, 0, 1, 0],
    [0, 0, 0, 0, 0, 2, 0, 0, 3],
    [0, 0, 0, 4, 0, 0, 0, 0, 0],
    [0, 0, 0, 0, 0, 0, 5, 0, 0],
    [4, 0, 1, 6, 0, 0, 0, 0, 0],
    [0, 0, 7, 1, 0, 0, 0, 0, 0],
    [0, 5, 0, 0, 0, 0, 2, 0, 0],
    [0, 0, 0, 0, 8, 0, 0, 4, 0],
    [0, 3, 0, 9, 1, 0, 0, 0, 0],
])


def run_solve(puzzle_text, config: SolverConfig) -> int:
    puzzle = parse_puzzle(puzzle_text)
    print("Puzzle:\n", sudoku_board_string(puzzle))

    solutions = solve_with_config(puzzle, config)
    for i, solution in enumerate(solutions, start=1):
        board = np.array([int(ch) for ch in solution]).reshape(9, 9)
        print(f"Solution {i}:\n", sudoku_board_string(board))
        print(solution)

    if not solutions:
        print("No solution found.")
        return 1
    print(f"Found {len(solutions)} solution(s) (limit {config.max_solutions}).")
    return 0


def run_possibilities(puzzle_text, config: SolverConfig) -> int:
    puzzle = parse_puzzle(puzzle_text)
    apply_logging(config)
    try:
        possibilities = prepare(puzzle)
    except ContradictionError:
        print("Puzzle is impossible: the clues contradict each other.")
        return 1
    print(possibilities)
    return 0


def run_bench(repeat: int, config: SolverConfig) -> int:
    apply_logging(config)

    start_time = time.perf_counter()
    for _ in range(repeat):
        prepare(BENCH_PUZZLE)
    prepare_time = (time.perf_counter() - start_time) / repeat

    start_time = time.perf_counter()
    for _ in range(repeat):
        solutions = solve_with_config(BENCH_PUZZLE, config)
    solve_time = (time.perf_counter() - start_time) / repeat

    print(f"prepare 17: {prepare_time * 1000:.3f} ms")
    print(f"solve 17:   {solve_time * 1000:.3f} ms ({len(solutions)} solution(s))")
    return 0


def cli(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Two-phase Sudoku solver: logic, then template search")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log propagation and search details")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # Solve command
    parser_solve = subparsers.add_parser("solve", help="Solve a puzzle")
    parser_solve.add_argument("puzzle", type=str, help="81 cells, row-major; 0 or . for unknown")
    parser_solve.add_argument("-n", "--max-solutions", type=int, default=SolverConfig.max_solutions,
                              help="Stop after this many solutions")

    # Possibilities command
    parser_poss = subparsers.add_parser("possibilities", help="Show candidates left after logic")
    parser_poss.add_argument("puzzle", type=str, help="81 cells, row-major; 0 or . for unknown")

    # Bench command
    parser_bench = subparsers.add_parser("bench", help="Time a 17-clue puzzle")
    parser_bench.add_argument("-r", "--repeat", type=int, default=10, help="Number of timed runs")

    args = parser.parse_args(argv)
    logging.basicConfig(format="%(name)s: %(message)s")

    config = SolverConfig(verbose=args.verbose)
    try:
        if args.command == "solve":
            config.max_solutions = args.max_solutions
            return run_solve(args.puzzle, config)
        elif args.command == "possibilities":
            return run_possibilities(args.puzzle, config)
        elif args.command == "bench":
            config.max_solutions = 2
            return run_bench(max(args.repeat, 1), config)
    except ValueError as e:
        print(f"Error: {e}")
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(cli())
