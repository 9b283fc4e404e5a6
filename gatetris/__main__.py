"""Entry point: python -m gatetris

Plays games with the fixed weights, or trains the weights with the genetic
algorithm.
"""

import argparse
import logging

from .ai.heuristic import Weights
from .bot import SELECTORS, TetrisBot

# Default configuration
CONFIG = {
    "width": 10,
    "height": 20,
    # Piece sequence: "shuffle" (7-bag), "random" or "worst" (adversarial)
    "selector": "shuffle",
    "seed": None,
    # Score placements by the best follow-up of the preview piece
    "lookahead": True,
    "use_hard_drops": True,
    # Stop a game after this many pieces (None = play until topped out)
    "max_pieces": None,
    # Push a junk row in from the bottom every N pieces (0 = never)
    "junk_interval": 0,
    # Evolved population, one individual per line
    "population_file": "population.txt",
}


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="gatetris", description=__doc__)
    parser.add_argument("mode", choices=["play", "train"], help="play games or evolve weights")
    parser.add_argument("--games", type=int, default=1, help="games to play (play mode)")
    parser.add_argument("--generations", type=int, default=1,
                        help="generations to evolve (train mode)")
    parser.add_argument("--population-file", default=CONFIG["population_file"])
    parser.add_argument("--weights", type=float, nargs=8, metavar="W",
                        help="weights to play with instead of the fixed set")
    parser.add_argument("--selector", choices=SELECTORS, default=CONFIG["selector"])
    parser.add_argument("--no-lookahead", action="store_true")
    parser.add_argument("--max-pieces", type=int, default=CONFIG["max_pieces"])
    parser.add_argument("--junk-interval", type=int, default=CONFIG["junk_interval"])
    parser.add_argument("--seed", type=int, default=CONFIG["seed"])
    parser.add_argument("--debug", action="store_true")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    config = dict(CONFIG)
    config.update(
        selector=args.selector,
        seed=args.seed,
        lookahead=not args.no_lookahead,
        max_pieces=args.max_pieces,
        junk_interval=args.junk_interval,
        population_file=args.population_file,
    )

    bot = TetrisBot(config)
    try:
        if args.mode == "train":
            evolution = bot.train(args.generations)
            print(f"Finished at generation {evolution.generation}, "
                  f"population saved to {config['population_file']}")
        else:
            if args.weights:
                bot.scoring.set_weights(Weights.from_sequence(args.weights))
            lines = bot.play(args.games)
            print(f"Lines per game: {lines}")
    except KeyboardInterrupt:
        print("\nShutting down...")


if __name__ == "__main__":
    main()
