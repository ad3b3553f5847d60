"""
Example: calling an algorithm, chaining its output, and working with data.

Run with ALGORITHMIA_API_KEY set.
"""

from typing import List

from algoclient import Algorithmia, ReadAcl
from algoclient.core.logger import configure_root_logger

configure_root_logger("DEBUG")

with Algorithmia.client() as client:
    # =========================================================================
    # Example 1: JSON in, typed value out
    # =========================================================================
    moving_avg = client.algo(("timeseries/SimpleMovingAverage", "0.1")).timeout(30)
    response = moving_avg.pipe(([0, 1, 2, 3, 15, 4, 5, 6, 7], 3))
    averages = response.decode(List[float])
    print(f"{averages} in {response.duration}s")

    # =========================================================================
    # Example 2: the result of one call is the input of the next
    # =========================================================================
    tokens = client.algo("nlp/Tokenize").pipe("The quick brown fox")
    counts = client.algo("nlp/CountTokens").pipe(tokens.as_input())
    print(counts)

    # =========================================================================
    # Example 3: data directories
    # =========================================================================
    photos = client.dir("data://.my/photos")
    if not photos.exists():
        photos.create(ReadAcl.PRIVATE)

    photos.child("notes.txt").put("uploaded from the example")

    for entry in photos.list():
        print(entry)

    with photos.child("notes.txt").get() as data:
        print(data.size, data.last_modified, data.into_string())
