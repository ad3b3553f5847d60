"""
Example: an algorithm handler served with the CLI.

    $ echo '{"content_type": "text", "data": "Jane"}' | PYTHONPATH=. algo serve examples.hello_handler hello --output /dev/stdout
    {"result": "Hello Jane", "metadata": {"content_type": "text", "duration": ...}}

Structured input that is a JSON string falls back to ``handle_text``; other
shapes are reported as unsupported.
"""

from typing import List

from algoclient import DecodedEntryPoint, EntryPoint, register_handler


@register_handler(name="hello")
class Hello(EntryPoint):
    def handle_text(self, text):
        return f"Hello {text}"


@register_handler(name="moving_average")
class MovingAverage(DecodedEntryPoint):
    input_type = tuple[List[float], int]

    def apply_decoded(self, decoded):
        values, window = decoded
        return [
            sum(values[i:i + window]) / window
            for i in range(len(values) - window + 1)
        ]
