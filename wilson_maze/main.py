import argparse
import sys
import os
import logging
import time

# Ensure project root is in path so we can import 'wilson_maze' package
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

def setup_logging(verbose: bool):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Wilson Maze: uniform spanning tree maze generator")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Generate Command
    gen_parser = subparsers.add_parser("generate", help="Generate a maze headless and print its stats")
    gen_parser.add_argument("--width", type=int, default=20, help="Maze Width")
    gen_parser.add_argument("--height", type=int, default=20, help="Maze Height")
    gen_parser.add_argument("--torus", action="store_true", help="Wrap edges around (toroidal grid)")
    gen_parser.add_argument("--seed", type=int, default=None, help="Random Seed")
    gen_parser.add_argument("--algo", type=str, default="wilson", choices=["wilson", "dfs"], help="Generation Algorithm")

    # Demo Command
    demo_parser = subparsers.add_parser("demo", help="Animate maze generation in a window, looping")
    demo_parser.add_argument("--size", type=int, default=7, help="Cells per side")
    demo_parser.add_argument("--delay", type=int, default=100, help="Delay between walk steps (ms)")
    demo_parser.add_argument("--hold", type=int, default=5000, help="Pause on the finished maze (ms)")
    demo_parser.add_argument("--planar", action="store_true", help="Disable wrap-around edges")
    demo_parser.add_argument("--window", type=int, default=400, help="Window size in pixels")
    demo_parser.add_argument("--seed", type=int, default=None, help="Random Seed")
    demo_parser.add_argument("--hud", action="store_true", help="Show parameter overlay")
    demo_parser.add_argument("--record", action="store_true", help="Record generation video")

    # Benchmark Command
    bench_parser = subparsers.add_parser("benchmark", help="Compare Wilson and randomized DFS")
    bench_parser.add_argument("--size", type=int, default=100, help="Benchmark size")
    bench_parser.add_argument("--seed", type=int, default=123, help="Random Seed")
    return parser

def make_generator(algo: str, graph, seed=None):
    if algo == "dfs":
        from wilson_maze.algo.dfs import RandomizedDFS
        return RandomizedDFS(graph, seed=seed)
    from wilson_maze.algo.wilson import WilsonsAlgorithm
    return WilsonsAlgorithm(graph, seed=seed)

def run_generate(args, logger) -> int:
    from wilson_maze.algo.scheduler import StepScheduler
    from wilson_maze.core.complexity import MazeStats
    from wilson_maze.core.graph import GridGraph

    topology = "torus" if args.torus else "planar"
    logger.info(f"Generating {args.width}x{args.height} {topology} maze with {args.algo.upper()}...")

    graph = GridGraph(args.width, args.height, toroidal=args.torus)
    generator = make_generator(args.algo, graph, seed=args.seed)

    t0 = time.time()
    steps = StepScheduler(step_delay=0.0, animate=False).run(generator)
    logger.info(f"Generation complete in {time.time() - t0:.4f}s")

    stats = MazeStats.calculate_stats(graph)
    logger.info(f"Stats: {stats}")
    if not MazeStats.is_spanning_tree(graph):
        logger.error("Carved edges do not form a spanning tree")
        return 1
    print(f"Done. Steps: {steps}, Edges: {stats['edges']}")
    return 0

def run_demo(args, logger) -> int:
    from wilson_maze.viz.renderer import Renderer

    renderer = Renderer(size=args.size, step_delay=args.delay / 1000.0, toroidal=not args.planar,
                        width=args.window, height=args.window, hold=args.hold / 1000.0,
                        record=args.record, seed=args.seed, show_hud=args.hud)
    if args.record:
        logger.info(f"Recording one video per maze into {renderer.recorder.output_dir}")

    renderer.init_window()
    renderer.run_loop()
    logger.info(f"Closed after {renderer.runs_completed} completed mazes")
    return 0

def run_benchmark(args, logger) -> int:
    from wilson_maze.core.graph import GridGraph

    logger.info(f"Running generator benchmark (Size: {args.size}x{args.size})...")
    print(f"\n{'ALGORITHM':<12} | {'TIME (s)':<10} | {'STEPS':<12} | {'DEAD ENDS':<10}")
    print("-" * 52)

    from wilson_maze.core.complexity import MazeStats
    for algo in ("wilson", "dfs"):
        graph = GridGraph(args.size, args.size)
        generator = make_generator(algo, graph, seed=args.seed)

        t_start = time.time()
        steps = generator.run_all()
        duration = time.time() - t_start

        dead_ends = MazeStats.calculate_stats(graph)["dead_ends"]
        print(f"{algo:<12} | {duration:<10.4f} | {steps:<12} | {dead_ends:<10}")
    return 0

def validate_args(parser: argparse.ArgumentParser, args):
    """Rejects bad sizes and delays before anything is built. Errors during generation propagate."""
    if args.command == "generate":
        if args.width < 1 or args.height < 1:
            parser.error(f"maze must be at least 1x1, got {args.width}x{args.height}")
    elif args.command == "demo":
        if args.size < 1:
            parser.error(f"--size must be at least 1, got {args.size}")
        if args.delay < 0 or args.hold < 0:
            parser.error("--delay and --hold must be non-negative")
        if args.window < 1:
            parser.error(f"--window must be at least 1, got {args.window}")
    elif args.command == "benchmark":
        if args.size < 1:
            parser.error(f"--size must be at least 1, got {args.size}")

def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    validate_args(parser, args)

    setup_logging(args.verbose)
    logger = logging.getLogger("wilson_maze")

    if args.command is None:
        parser.print_help()
        return 0

    logger.info(f"Running command: {args.command}")

    if args.command == "generate":
        return run_generate(args, logger)
    elif args.command == "demo":
        return run_demo(args, logger)
    elif args.command == "benchmark":
        return run_benchmark(args, logger)
    return 0

if __name__ == "__main__":
    sys.exit(main())
