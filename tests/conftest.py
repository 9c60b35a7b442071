"""Shared sample documents: the same person record in every format."""

import pytest

JSON_EXAMPLE = """{
  "name": "Alice Johnson",
  "age": 28,
  "isStudent": false,
  "courses": ["Math", "Computer Science", "Physics"],
  "address": {
    "city": "Boston",
    "zip": "02101"
  }
}"""

YAML_EXAMPLE = """name: Alice Johnson
age: 28
isStudent: false
courses:
  - Math
  - Computer Science
  - Physics
address:
  city: Boston
  zip: "02101\""""

XML_EXAMPLE = """<?xml version="1.0" encoding="UTF-8"?>
<person>
  <name>Alice Johnson</name>
  <age>28</age>
  <isStudent>false</isStudent>
  <courses>
    <course>Math</course>
    <course>Computer Science</course>
    <course>Physics</course>
  </courses>
  <address>
    <city>Boston</city>
    <zip>02101</zip>
  </address>
</person>"""

TOML_EXAMPLE = """name = "Alice Johnson"
age = 28
isStudent = false

[[courses]]
name = "Math"

[[courses]]
name = "Computer Science"

[[courses]]
name = "Physics"

[address]
city = "Boston"
zip = "02101\""""

EXAMPLES = {
    "json": JSON_EXAMPLE,
    "yaml": YAML_EXAMPLE,
    "xml": XML_EXAMPLE,
    "toml": TOML_EXAMPLE,
}


@pytest.fixture
def json_example():
    return JSON_EXAMPLE


@pytest.fixture
def yaml_example():
    return YAML_EXAMPLE


@pytest.fixture
def xml_example():
    return XML_EXAMPLE


@pytest.fixture
def toml_example():
    return TOML_EXAMPLE


@pytest.fixture
def examples():
    return dict(EXAMPLES)
