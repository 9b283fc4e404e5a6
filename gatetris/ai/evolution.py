"""Genetic algorithm that tunes the scoring weights between games.

Each individual of the population is one weight vector. Individuals are
played one game each, in order; the lines cleared in that game is the
individual's fitness. Once the whole population has played, the next
generation is bred from the fittest half.

The population can be persisted to a plain-text file: one individual per
line, weights separated by spaces.
"""

from __future__ import annotations

import logging
import math
import random
import statistics
from dataclasses import dataclass
from pathlib import Path

from .heuristic import NUM_WEIGHTS, ScoringSystem, Weights

logger = logging.getLogger(__name__)

POPULATION_SIZE = 16
ELITE_PERCENT = 0.25
MUTATION_RATE = 0.10
GENE_RANGE = (-5.0, 5.0)


@dataclass
class Individual:
    chromosomes: list[float]
    fitness: int = 0

    @property
    def weights(self) -> Weights:
        return Weights.from_sequence(self.chromosomes)


class Evolution:
    """Generational GA over weight vectors.

    Usage:
        evolution = Evolution(population_file="population.txt")
        while training:
            evolution.update_scoring(scoring)
            lines = play_one_game()
            evolution.submit(lines)
    """

    def __init__(
        self,
        population_size: int = POPULATION_SIZE,
        elite_percent: float = ELITE_PERCENT,
        mutation_rate: float = MUTATION_RATE,
        population_file: str | Path | None = None,
        seed: int | None = None,
    ):
        if population_size < 2:
            raise ValueError("Population needs at least 2 individuals")
        self.population_size = population_size
        self.elite_percent = elite_percent
        self.mutation_rate = mutation_rate
        self.population_file = Path(population_file) if population_file else None
        self._rng = random.Random(seed)

        self.generation = 1
        self.current = 0
        self.population = self._load_population()

    # ── Population setup and persistence ────────────────────────────────────

    def _random_gene(self) -> float:
        return self._rng.uniform(*GENE_RANGE)

    def _random_population(self) -> list[Individual]:
        return [
            Individual([self._random_gene() for _ in range(NUM_WEIGHTS)])
            for _ in range(self.population_size)
        ]

    def _load_population(self) -> list[Individual]:
        if self.population_file is None:
            return self._random_population()
        if not self.population_file.exists():
            logger.info(
                "Population data not found at %s - generating random population",
                self.population_file,
            )
            return self._random_population()

        population = []
        with open(self.population_file) as f:
            for lineno, line in enumerate(f, 1):
                if not line.strip():
                    continue
                try:
                    chromosomes = [float(v) for v in line.split()]
                except ValueError as e:
                    raise ValueError(
                        f"{self.population_file}:{lineno}: not a list of numbers"
                    ) from e
                if len(chromosomes) != NUM_WEIGHTS:
                    raise ValueError(
                        f"{self.population_file}:{lineno}: expected {NUM_WEIGHTS} "
                        f"weights, got {len(chromosomes)}"
                    )
                population.append(Individual(chromosomes))

        if not population:
            logger.info("Population file %s is empty - generating random population",
                        self.population_file)
            return self._random_population()

        logger.info("Loaded %d individuals from %s", len(population), self.population_file)
        self.population_size = len(population)
        return population

    def save(self, path: str | Path | None = None):
        """Write the population to path (default: the population file)."""
        path = Path(path) if path else self.population_file
        if path is None:
            raise ValueError("No population file configured")
        with open(path, "w") as f:
            for individual in self.population:
                f.write(" ".join(repr(g) for g in individual.chromosomes) + "\n")
        logger.debug("Saved population to %s", path)

    # ── GA loop ─────────────────────────────────────────────────────────────

    @property
    def current_individual(self) -> Individual:
        return self.population[self.current]

    def update_scoring(self, scoring: ScoringSystem):
        """Install the weights of the individual about to be played."""
        scoring.set_weights(self.current_individual.weights)

    def submit(self, fitness: int):
        """Record the fitness (lines cleared) of the current individual."""
        individual = self.current_individual
        logger.info(
            "Generation %-2d - Candidate %-2d: [%s] score = %d",
            self.generation,
            self.current + 1,
            ", ".join(f"{g:+.2f}" for g in individual.chromosomes),
            fitness,
        )
        individual.fitness = fitness
        self.current += 1

        if self.current == self.population_size:
            self._new_generation()

    def _new_generation(self):
        ranked = sorted(self.population, key=lambda e: e.fitness, reverse=True)
        logger.info(
            "Generation %-2d - max = %d, med = %d, min = %d",
            self.generation,
            ranked[0].fitness,
            statistics.median_low([e.fitness for e in ranked]),
            ranked[-1].fitness,
        )

        self.population = self.breed(ranked)
        self.current = 0
        self.generation += 1

        if self.population_file is not None:
            self.save()

    def breed(self, ranked: list[Individual]) -> list[Individual]:
        """Build the next generation from a population sorted best first.

        The elite are carried over unchanged; the rest are uniform crossovers
        of two parents from the top half, with per-gene mutation.
        """
        size = len(ranked)
        elite = math.ceil(size * self.elite_percent)
        parents = ranked[:max(1, size // 2)]

        new_population = [Individual(list(e.chromosomes)) for e in ranked[:elite]]
        while len(new_population) < size:
            mother = self._rng.choice(parents)
            father = self._rng.choice(parents)
            child = []
            for j in range(NUM_WEIGHTS):
                gene = (mother if self._rng.random() < 0.5 else father).chromosomes[j]
                if self._rng.random() < self.mutation_rate:
                    gene = self._random_gene()
                child.append(gene)
            new_population.append(Individual(child))

        return new_population
