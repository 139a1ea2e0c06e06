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

import json
import sys

import pytest
import yaml

from channel_readiness import main as cli
from channel_readiness.models.child import ObservedService
from tests.channel_statuses import HEALTHY, build_channel


def write_inputs(tmp_path, channel, observed):
    channel_path = tmp_path / "channel.yaml"
    observed_path = tmp_path / "observed.yaml"
    with channel_path.open("w") as f:
        yaml.safe_dump(channel.model_dump(mode="json", exclude_none=True), f)
    with observed_path.open("w") as f:
        yaml.safe_dump(observed.model_dump(mode="json", exclude_none=True), f)
    return channel_path, observed_path


def run_main(monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", ["channel-readiness", *args])
    cli.main()


def test_evaluate_json(monkeypatch, tmp_path, capsys):
    channel_path, observed_path = write_inputs(tmp_path, build_channel(generation=2), HEALTHY)
    run_main(monkeypatch, "evaluate", "-q", "-i", channel_path.as_posix(), "-o", observed_path.as_posix())

    out = capsys.readouterr().out
    body, verdict = out.rsplit("Ready: ", 1)
    assert verdict.strip() == "True"
    status = json.loads(body)
    assert status["observedGeneration"] == 2
    ready = [x for x in status["conditions"] if x["type"] == "Ready"][0]
    assert ready["status"] == "True"


def test_evaluate_table_without_observation(monkeypatch, tmp_path, capsys):
    channel_path, _ = write_inputs(tmp_path, build_channel(), HEALTHY)
    run_main(monkeypatch, "evaluate", "-q", "-f", "table", "-i", channel_path.as_posix())

    out = capsys.readouterr().out
    assert "DispatcherServiceNotObserved" in out
    assert "DeadLetterSinkNotConfigured" in out
    assert out.strip().endswith("Ready: False")


def test_evaluate_invalid_input(monkeypatch, tmp_path):
    channel_path = tmp_path / "channel.yaml"
    channel_path.write_text("metadata:\n  generation: not-a-number\n")
    with pytest.raises(SystemExit) as e:
        run_main(monkeypatch, "evaluate", "-i", channel_path.as_posix())
    assert e.value.code == 1


LOADED_CHANNEL = """\
apiVersion: messaging.knative.dev/v1
kind: InMemoryChannel
metadata:
  name: imc
  namespace: ns
  generation: 4
status:
  observedGeneration: 4
  conditions:
  - type: Ready
    status: "True"
  - type: ServiceReady
    status: "False"
    reason: NoService
    lastTransitionTime: 2024-10-01T00:00:00
  - type: EndpointsReady
    status: Unknown
    lastTransitionTime: 2024-10-01T00:00:00
"""


def test_evaluate_loaded_conditions(monkeypatch, tmp_path, capsys):
    channel_path = tmp_path / "channel.yaml"
    channel_path.write_text(LOADED_CHANNEL)
    observed = HEALTHY.model_copy(update={"service": ObservedService(name="imc-dispatcher", exists=False)})
    _, observed_path = write_inputs(tmp_path, build_channel(), observed)
    run_main(monkeypatch, "evaluate", "-q", "-i", channel_path.as_posix(), "-o", observed_path.as_posix())

    out = capsys.readouterr().out
    body, verdict = out.rsplit("Ready: ", 1)
    assert verdict.strip() == "False"
    conditions = {x["type"]: x for x in json.loads(body)["conditions"]}
    assert conditions["Ready"]["status"] == "False"
    assert conditions["Ready"]["reason"] == "DispatcherServiceDoesNotExist"
    assert conditions["ServiceReady"]["lastTransitionTime"].startswith("2024-10-01T00:00:00")
    assert conditions["EndpointsReady"]["status"] == "True"
    assert not conditions["EndpointsReady"]["lastTransitionTime"].startswith("2024-10-01T00:00:00")


def test_evaluate_missing_file(monkeypatch, tmp_path):
    with pytest.raises(SystemExit) as e:
        run_main(monkeypatch, "evaluate", "-i", (tmp_path / "absent.yaml").as_posix())
    assert e.value.code == 1


def test_evaluate_malformed_yaml(monkeypatch, tmp_path):
    channel_path = tmp_path / "channel.yaml"
    channel_path.write_text("metadata: [name: imc\n")
    with pytest.raises(SystemExit) as e:
        run_main(monkeypatch, "evaluate", "-i", channel_path.as_posix())
    assert e.value.code == 1
