"""Store a cleaned snapshot as JSON and render it later."""

from domdown import ai_studio_chrome, parse_html, render
from domdown.serialization import from_json, to_json

tree = ai_studio_chrome(parse_html("<p>Answer <button>Copy</button></p>"))

json_str = to_json(tree)
restored = from_json(json_str)

print("Original == restored:", tree == restored)
print("JSON length:", len(json_str), "chars")
print(render(restored).markdown)
