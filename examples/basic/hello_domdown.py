"""HTML in, Markdown out: zero config, zero deps."""

from domdown import convert

result = convert("<h1>Hello <b>World</b></h1><ul><li>one</li><li>two</li></ul>")
print(result.markdown)
