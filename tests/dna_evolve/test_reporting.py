"""
Unit tests for console reporting.
"""

import logging

from dna_evolve.logging_config import EvolutionLogger
from dna_evolve.reporting import SEPARATOR, format_generation, report_generation
from evolution.target_finder import TargetFinder


def evaluated(*dnas):
    population = [TargetFinder(dna) for dna in dnas]
    for evolver in population:
        evolver.simulate_life()
    return sorted(population, key=lambda e: e.fitness, reverse=True)


class TestFormatGeneration:
    """Test suite for format_generation."""

    def test_one_line_per_candidate(self):
        population = evaluated("wwdd", "aass")
        text = format_generation(population)

        lines = text.splitlines()
        assert lines[0] == SEPARATOR
        assert lines[1] == f"wwdd - {population[0].fitness}"
        assert lines[2] == f"aass - {population[1].fitness}"
        assert text.endswith("\n")

    def test_generation_header(self):
        text = format_generation(evaluated("wd"), generation=12)
        assert text.splitlines()[0] == "Generation 12"

    def test_empty_population(self):
        assert format_generation([]) == SEPARATOR + "\n"


class TestReportGeneration:
    """Test suite for report_generation."""

    def test_reports_every_candidate(self, caplog):
        population = evaluated("wwdd", "aass", "wdwd")
        log = EvolutionLogger("dna_evolve.test_reporting")

        with caplog.at_level(logging.DEBUG, logger="dna_evolve.test_reporting"):
            report_generation(population, generation=5, logger=log)

        reports = [r for r in caplog.records if r.event_type == "candidate_report"]
        assert [r.dna for r in reports] == [e.dna for e in population]
        assert [r.rank for r in reports] == [0, 1, 2]

        summary = [r for r in caplog.records if r.event_type == "generation_complete"]
        assert summary[0].generation == 5
        assert summary[0].fitness == population[0].fitness

    def test_empty_population_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="dna_evolve.reporting"):
            report_generation([])

        assert "empty population" in caplog.text

    def test_does_not_modify_population(self):
        population = evaluated("wwdd", "aass")
        before = [(e.dna, e.fitness) for e in population]

        report_generation(population)

        assert [(e.dna, e.fitness) for e in population] == before
