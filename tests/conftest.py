from __future__ import annotations

import pytest

from element_finder import Document

PAGE = """
<html>
  <head><title>Listing</title></head>
  <body>
    <div class="news"><a href="/story-1" title="first">First story</a><p>Call 12345 today</p></div>
    <div class="news"><a href="/story-2">Second story</a></div>
    <span id="keep">unrelated</span>
    <p>Hi</p>
  </body>
</html>
"""


@pytest.fixture
def page() -> Document:
    return Document(PAGE)
