import logging
from pathlib import Path

from rich import print

import reqgraph as rg

logging.basicConfig(level=logging.DEBUG)

input_data = rg.load_input_from_toml(Path(__file__).parent / "requirements.toml")

graph = rg.compile_graph(input_data.requirements, palette=rg.Palette.BLUE)
print(graph.to_dict())
for issue in graph.issues:
    print(issue)

for case in rg.generate_test_cases("X = A AND B AND C", input_data.catalog):
    print(case.input_values, case.case_output)
