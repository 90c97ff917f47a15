import argparse
import logging
import os
import sys
import typing

import yaml

import chordpattern.generators
import chordpattern.pipeline


# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


DEFAULTS: typing.Dict[str, typing.Any] = {
	"key": "C",
	"tempo": 120,
	"time_signature": "4/4",
	"type": "bass",
	"style": "up",
	"octave": 4,
	"channel": 0,
	"seed": None,
	"strict": False,
}


def load_config (config_path: str = 'chordpattern.yaml') -> dict:

	"""
	Load default settings from a YAML file.
	"""

	if not os.path.exists(config_path):
		logger.warning(f"Config file {config_path} not found. Using defaults.")
		return {}

	with open(config_path, 'r') as f:
		return yaml.safe_load(f) or {}


def build_parser () -> argparse.ArgumentParser:

	parser = argparse.ArgumentParser(prog="chordpattern", description="Generate a MIDI pattern from a chord progression.")

	parser.add_argument("progression", help="Whitespace-separated chords, e.g. \"C G Am F\"")
	parser.add_argument("--config", default="chordpattern.yaml", help="YAML file with default settings")
	parser.add_argument("--key")
	parser.add_argument("--tempo", type=float)
	parser.add_argument("--time-signature", dest="time_signature")
	parser.add_argument("--type", choices=chordpattern.generators.PATTERN_TYPES)
	parser.add_argument("--style", choices=chordpattern.generators.ARPEGGIO_STYLES)
	parser.add_argument("--octave", type=int)
	parser.add_argument("--channel", type=int)
	parser.add_argument("--seed", type=int)
	parser.add_argument("--strict", action="store_true", default=None, help="Reject unknown chord suffixes")
	parser.add_argument("--output", "-o", help="Write a .mid file instead of printing base64")

	return parser


def main (argv: typing.Optional[typing.List[str]] = None) -> int:

	"""
	Command line entry point. Returns the process exit status.
	"""

	args = build_parser().parse_args(argv)

	# Command-line flags override the config file, which overrides DEFAULTS
	settings = dict(DEFAULTS)
	settings.update(load_config(args.config))
	settings.update({name: value for name, value in vars(args).items() if value is not None})

	try:
		result = chordpattern.pipeline.render(
			settings["progression"],
			key = settings["key"],
			tempo = settings["tempo"],
			time_signature = settings["time_signature"],
			pattern_type = settings["type"],
			style = settings["style"],
			seed = settings["seed"],
			octave = settings["octave"],
			strict = settings["strict"],
			channel = settings["channel"]
		)

	except ValueError as e:
		logger.error(f"Could not generate pattern: {e}")
		return 2

	if settings.get("output"):

		with open(settings["output"], 'wb') as f:
			f.write(result.data)

		logger.info(f"Saved {settings['output']}")

	else:
		print(result.base64)

	return 0


if __name__ == "__main__":
	sys.exit(main())
