from pathlib import Path

import pytest

INPUT_TOML = """\
expressions = ["X = A AND B", "Y = NOT A"]

[[requirements]]
id = "R1"
text = "Top-level requirement"
priority = 1
dependency = ["R2", "AND", ["R3", "OR", "R4"]]

[[requirements]]
id = "R2"
text = "Second requirement"
priority = 2

[[requirements]]
id = "R3"
text = "Third requirement"
priority = 3
dependency = []

[[requirements]]
id = "R4"
text = "Fourth requirement"
priority = 4
"""


@pytest.fixture
def input_path(tmp_path: Path) -> Path:
    path = tmp_path / "requirements.toml"
    path.write_text(INPUT_TOML, encoding="utf-8")
    return path
