import base64
import io
import json

from algoclient.algo.entrypoint import EntryPoint
from algoclient.algo.runner import HandlerRunner


class Greeter(EntryPoint):
    def handle_text(self, text):
        if text == "crash":
            raise RuntimeError("crashed")
        return f"Hello {text}"

    def handle_binary(self, data):
        return data.upper()


def test_handle_line_success():
    runner = HandlerRunner(Greeter(), output=io.StringIO())
    response = runner.handle_line('{"content_type":"text","data":"Jane"}')
    assert response["result"] == "Hello Jane"
    assert response["metadata"]["content_type"] == "text"
    assert response["metadata"]["duration"] >= 0


def test_handle_line_binary_result_is_base64():
    runner = HandlerRunner(Greeter(), output=io.StringIO())
    data = base64.b64encode(b"abc").decode("ascii")
    response = runner.handle_line(json.dumps({"content_type": "binary", "data": data}))
    assert base64.b64decode(response["result"]) == b"ABC"
    assert response["metadata"]["content_type"] == "binary"


def test_handle_line_reports_unsupported_input():
    runner = HandlerRunner(Greeter(), output=io.StringIO())
    response = runner.handle_line('{"content_type":"json","data":[1,2]}')
    assert "not supported" in response["error"]
    assert "stacktrace" in response


def test_handle_line_reports_malformed_request():
    runner = HandlerRunner(Greeter(), output=io.StringIO())
    response = runner.handle_line("not json")
    assert "malformed json" in response["error"]


def test_serve_writes_one_line_per_request_and_continues_after_errors():
    out = io.StringIO()
    runner = HandlerRunner(Greeter(), output=out)
    lines = [
        '{"content_type":"text","data":"a"}\n',
        "\n",
        '{"content_type":"text","data":"crash"}\n',
        '{"content_type":"text","data":"b"}\n',
    ]

    handled = runner.serve(lines)

    assert handled == 3
    written = [json.loads(line) for line in out.getvalue().splitlines()]
    assert written[0]["result"] == "Hello a"
    assert written[1]["error"] == "crashed"
    assert written[2]["result"] == "Hello b"


def test_serve_writes_to_output_path(tmp_path):
    output_path = tmp_path / "algoout"
    runner = HandlerRunner(Greeter(), output_path=str(output_path))

    runner.serve(['{"content_type":"text","data":"pipe"}'])

    written = json.loads(output_path.read_text().strip())
    assert written["result"] == "Hello pipe"
