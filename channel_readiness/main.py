# Copyright contributors to the ITBench project. All rights reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     https://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from channel_readiness.app.config import AppConfig
from channel_readiness.channel_reconciler import ChannelStatusReconciler
from channel_readiness.common import log
from channel_readiness.models.channel import InMemoryChannel
from channel_readiness.models.child import ObservedChildren
from channel_readiness.observer import Observer

logger = logging.getLogger(__name__)


def load_yaml(path: Optional[str]) -> Dict[str, Any]:
    if not path:
        return {}
    with Path(path).open("r") as f:
        data = yaml.safe_load(f)
    return data if data else {}


def evaluate(args):
    try:
        channel = InMemoryChannel.model_validate(load_yaml(args.input))
        observed = ObservedChildren.model_validate(load_yaml(args.observed))
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Failed to load input: {e}")
        sys.exit(1)
    except ValidationError as e:
        logger.error(f"Invalid input: {e}")
        sys.exit(1)

    observer = Observer() if args.quiet else None
    reconciler = ChannelStatusReconciler(config=AppConfig(), observer=observer)
    status = reconciler.reconcile(channel, observed)

    if args.format == "table":
        print(status.to_dataframe().to_string(index=False))
    else:
        print(status.model_dump_json(indent=2))
    print(f"Ready: {channel.is_ready()}")


def main():
    parser = argparse.ArgumentParser(description="InMemoryChannel readiness evaluation")
    parser.add_argument("-v", "--verbose", help="Display verbose output", action="count", default=0)

    subparsers = parser.add_subparsers(dest="command", required=True)

    parser_evaluate = subparsers.add_parser(
        "evaluate", description="Run one reconcile pass over a channel status", help="see `evaluate -h`"
    )
    parser_evaluate.add_argument("-i", "--input", type=str, help="Path to the InMemoryChannel manifest (YAML or JSON).", required=True)
    parser_evaluate.add_argument("-o", "--observed", type=str, help="Path to the observed child resources (YAML or JSON).")
    parser_evaluate.add_argument("-f", "--format", type=str, choices=["json", "table"], default="json", help="Output format (default: json).")
    parser_evaluate.add_argument("-q", "--quiet", action="store_true", help="Do not log condition transition events.")

    args = parser.parse_args()

    if args.verbose > 0:
        log.init(logging.DEBUG)
    else:
        log.init()

    if args.command == "evaluate":
        evaluate(args)


if __name__ == "__main__":
    main()
