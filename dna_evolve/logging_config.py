"""
Logging setup for DNA Evolve.

One formatter renders evolution records either as console lines or as JSON
objects, and EvolutionLogger attaches generation, rank and fitness fields to
the records it emits.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

# Loggers that receive the application handlers
PACKAGE_LOGGERS = ("dna_evolve", "evolution", "monitoring")

# Record fields shown on console lines, with their labels
FIELD_LABELS: Dict[str, str] = {
    "generation": "gen",
    "rank": "rank",
    "fitness": "fitness",
    "mean_fitness": "mean",
    "population_size": "size",
    "duration_ms": "took_ms",
}

# JSON output also carries the event name and the candidate DNA
JSON_FIELDS = ("event_type", "dna", *FIELD_LABELS)


def parse_level(value: Any) -> str:
    """Normalize a level name such as 'debug', raising ValueError if unknown."""
    level = str(value).strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"unknown log level {value!r}")
    return level


class EvolutionFormatter(logging.Formatter):
    """Console or JSON-lines rendering of evolution records."""

    LEVEL_COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, json_output: bool = False, use_colors: bool = True):
        super().__init__(datefmt="%H:%M:%S")
        self.json_output = json_output
        self.use_colors = use_colors and not json_output

    def format(self, record: logging.LogRecord) -> str:
        if self.json_output:
            return self._format_json(record)
        return self._format_line(record)

    def _format_json(self, record: logging.LogRecord) -> str:
        data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        data.update(
            {name: getattr(record, name) for name in JSON_FIELDS if hasattr(record, name)}
        )
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)
        return json.dumps(data, default=str)

    def _format_line(self, record: logging.LogRecord) -> str:
        level = record.levelname
        if self.use_colors and level in self.LEVEL_COLORS:
            level = f"{self.LEVEL_COLORS[level]}{level}{self.RESET}"

        fields = []
        for name, label in FIELD_LABELS.items():
            value = getattr(record, name, None)
            if value is None:
                continue
            if isinstance(value, float):
                value = f"{value:.2f}"
            fields.append(f"{label}={value}")

        line = f"{self.formatTime(record, self.datefmt)} {level} {record.name}: "
        line += record.getMessage()
        if fields:
            line += f" [{', '.join(fields)}]"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class EvolutionLogger(logging.LoggerAdapter):
    """Logger adapter with helpers for the events of an evolution run."""

    def __init__(self, name: str = "dna_evolve"):
        super().__init__(logging.getLogger(name), {})

    def process(self, msg: Any, kwargs: Any) -> Any:
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs

    def evolution_started(self, evolver_type: str, population_size: int) -> None:
        self.info(
            f"Evolving {population_size} {evolver_type} candidates",
            extra={"event_type": "evolution_started", "population_size": population_size},
        )

    def generation_complete(
        self, generation: Optional[int], best_fitness: int, mean_fitness: float
    ) -> None:
        self.info(
            f"Generation {generation} complete",
            extra={
                "event_type": "generation_complete",
                "generation": generation,
                "fitness": best_fitness,
                "mean_fitness": mean_fitness,
            },
        )

    def candidate_report(
        self, generation: Optional[int], rank: int, dna: str, fitness: int
    ) -> None:
        self.debug(
            f"{dna} - {fitness}",
            extra={
                "event_type": "candidate_report",
                "generation": generation,
                "rank": rank,
                "dna": dna,
                "fitness": fitness,
            },
        )

    def evolution_complete(
        self, generations: int, best_fitness: int, total_duration_ms: int
    ) -> None:
        self.info(
            f"Evolution complete after {generations} generations",
            extra={
                "event_type": "evolution_complete",
                "generation": generations,
                "fitness": best_fitness,
                "duration_ms": total_duration_ms,
            },
        )


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: Optional[Path] = None,
    use_colors: bool = True,
) -> None:
    """Install fresh handlers on the package loggers.

    Args:
        level: Level name, case-insensitive. Unknown names raise ValueError
            before any logger is touched.
        json_output: Emit JSON lines on the console instead of text
        log_file: Also append JSON lines to this file
        use_colors: Color the level name of console lines
    """
    numeric_level = logging.getLevelName(parse_level(level))

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(EvolutionFormatter(json_output, use_colors))
    handlers: List[logging.Handler] = [console]

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(EvolutionFormatter(json_output=True))
        handlers.append(file_handler)

    # Earlier handlers are shared by every package logger
    for handler in logging.getLogger(PACKAGE_LOGGERS[0]).handlers:
        handler.close()

    for name in PACKAGE_LOGGERS:
        logger = logging.getLogger(name)
        logger.setLevel(numeric_level)
        logger.handlers[:] = handlers


def get_logger(name: str) -> EvolutionLogger:
    return EvolutionLogger(name)
