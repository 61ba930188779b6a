# main.py
import argparse
import sys
import tomllib  # Standard in Python 3.11+
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from typing import Dict as PyDict

import numpy as np
import structlog
import yaml

from agent.config import AgentConfig
from agent.controller import WumpusAgent
from agent.danger import danger_grid
from agent.directions import Heading
from agent.goals import PlanningError
from engine.episode_loop import EpisodeLoop, EpisodeResult
from utils.logging_utils import resolve_level, setup_logging
from world.cave import CaveMap, CaveWorld

# --- Paths relative to this script's location ---
SCRIPT_DIR = Path(__file__).parent.resolve()
CONFIG_DIR = SCRIPT_DIR / "config"

CONFIG_FILE = CONFIG_DIR / "config.yaml"
SETTINGS_FILE = CONFIG_DIR / "settings.toml"
# --- End Paths ---

DEFAULT_MAX_STEPS = 1000

log = structlog.get_logger()


@dataclass
class Configs:
    main: PyDict[str, Any] = field(default_factory=dict)
    settings: PyDict[str, Any] = field(default_factory=dict)


# --- Config Loading Helpers ---
def load_toml_config(config_path: Path, config_name: str) -> PyDict[str, Any]:
    """Loads a TOML configuration file; missing or broken files yield ``{}``."""
    if not config_path.is_file():
        log.warning(f"{config_name} config file not found", path=str(config_path))
        return {}
    try:
        with config_path.open("rb") as f:  # tomllib requires bytes mode
            config_data = tomllib.load(f)
        log.info(f"{config_name} config loaded", path=str(config_path))
        return config_data
    except tomllib.TOMLDecodeError as e:
        log.error(f"Error parsing TOML for {config_name}", path=str(config_path), error=str(e), exc_info=True)
        return {}


def load_yaml_config(config_path: Path, config_name: str) -> PyDict[str, Any]:
    """Loads a YAML configuration file, raising on missing or invalid files."""
    if not config_path.is_file():
        log.error(f"{config_name} config file not found", path=str(config_path))
        raise FileNotFoundError(f"{config_name} configuration file not found: {config_path}")
    try:
        with config_path.open("r") as f:
            config_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        log.error(f"Error parsing YAML for {config_name}", path=str(config_path), error=str(e), exc_info=True)
        raise
    if config_data is None:
        log.warning(f"{config_name} config file is empty.", path=str(config_path))
        return {}
    log.info(f"{config_name} config loaded", path=str(config_path))
    return config_data


def load_configs(config_path: Path = CONFIG_FILE, settings_path: Path = SETTINGS_FILE) -> Configs:
    return Configs(
        main=load_yaml_config(config_path, "Main"),
        settings=load_toml_config(settings_path, "Settings"),
    )
# --- End Config Loading ---


def init_cave(configs: Configs) -> CaveMap:
    cave_cfg = configs.main["cave"]
    heading_name = str(cave_cfg.get("start_heading", "EAST")).upper()
    return CaveMap.from_layout(cave_cfg["layout"], start_heading=Heading[heading_name])


def init_agent(configs: Configs, cave: CaveMap) -> WumpusAgent:
    agent_cfg = dict(configs.main.get("agent", {}))
    agent_cfg.setdefault("arena", {"width": cave.width, "height": cave.height})
    config = AgentConfig.from_dict(agent_cfg)
    return WumpusAgent(start=cave.start, heading=cave.start_heading, config=config)


def format_danger_map(agent: WumpusAgent) -> str:
    """Render the agent's believed danger grid, north at the top."""
    grid = danger_grid(agent.belief, config=agent.config)
    lines = []
    for row in np.flipud(grid):
        lines.append(" ".join("  ?" if value < 0 else f"{int(value):3d}" for value in row))
    return "\n".join(lines)


def run_episode(configs: Configs) -> EpisodeResult:
    cave = init_cave(configs)
    agent = init_agent(configs, cave)
    world = CaveWorld(cave, projectiles=agent.config.projectiles)
    max_steps = int(configs.main.get("episode", {}).get("max_steps", DEFAULT_MAX_STEPS))
    result = EpisodeLoop(agent, world, max_steps=max_steps).run()
    if configs.settings.get("output", {}).get("print_danger_map", False):
        print("\n--- Believed danger (north up, ? = unknown) ---")
        print(format_danger_map(agent))
        print("-----------------------------------------------\n")
    return result


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the application."""
    parser = argparse.ArgumentParser(description="Run the cave agent for one episode.")
    parser.add_argument("--config", type=Path, default=CONFIG_FILE, help="Main YAML config.")
    parser.add_argument("--settings", type=Path, default=SETTINGS_FILE, help="TOML settings.")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Logging level (overrides settings)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    # Bootstrap from the command line until the settings file has been read
    setup_logging(resolve_level({}, args.log_level, args.verbose), final=False)

    try:
        configs = load_configs(args.config, args.settings)
    except FileNotFoundError as e:
        log.critical("Required file not found during init", error=str(e), exc_info=True)
        sys.exit(f"Initialization failed: File not found - {e}")
    except yaml.YAMLError as e:
        log.critical("Invalid YAML configuration", error=str(e), exc_info=True)
        sys.exit(f"Configuration failed: {e}")

    logging_cfg = configs.settings.get("logging", {})
    setup_logging(
        resolve_level(configs.settings, args.log_level, args.verbose),
        colors=bool(logging_cfg.get("colors", True)),
    )

    try:
        result = run_episode(configs)
    except KeyError as e:
        log.critical("Missing required key, possibly in config", key=str(e), exc_info=True)
        sys.exit(f"Configuration failed: Missing key {e}")
    except PlanningError as e:
        log.critical("Agent could not plan", error=str(e), exc_info=True)
        sys.exit(f"Episode aborted: {e}")
    except TypeError as e:
        log.critical("Fatal Type Error during init", error=str(e), exc_info=True)
        sys.exit(f"Initialization failed (TypeError): {e}")
    except ValueError as e:
        log.critical("Invalid value during episode", error=str(e), exc_info=True)
        sys.exit(f"Episode failed: {e}")
    except Exception as e:
        log.critical("Fatal error during episode", error=str(e), exc_info=True)
        sys.exit(f"Episode failed: {e}")

    print(f"Outcome: {result.outcome}  steps: {result.steps}  score: {result.score}  gold: {result.has_gold}")


if __name__ == "__main__":
    main()
