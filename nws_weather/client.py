import json
import logging
import queue
import subprocess
import sys
import threading
from typing import Any, Dict, List, Optional

logger = logging.getLogger("nws_weather.client")

PROTOCOL_VERSION = "2024-11-05"
SERVER_COMMAND = [sys.executable, "-m", "nws_weather.server", "--transport", "stdio"]


class ToolClientError(Exception):
    pass


class StdioToolClient:
    """JSON-RPC 2.0 client that drives the weather server over stdio.

    Usage:
        with StdioToolClient() as client:
            print(client.call_tool("get_forecast", {"latitude": "34.05", "longitude": "-118.25"}))
    """

    def __init__(self, command: Optional[List[str]] = None, cwd: str = ".", timeout: float = 30.0,
                 env: Optional[Dict[str, str]] = None):
        self.command = command or SERVER_COMMAND
        self.cwd = cwd
        self.timeout = timeout
        self.env = env
        self.proc: Optional[subprocess.Popen] = None
        self.server_info: Dict[str, Any] = {}
        self._id = 0
        self._pending: Dict[int, queue.Queue] = {}
        self._lock = threading.Lock()
        self._write_lock = threading.Lock()

    def __enter__(self) -> "StdioToolClient":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    def start(self) -> None:
        if self.proc:
            return
        self.proc = subprocess.Popen(
            self.command,
            cwd=self.cwd,
            env=self.env,
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            bufsize=0,
        )
        threading.Thread(target=self._reader_loop, daemon=True).start()
        threading.Thread(target=self._stderr_loop, daemon=True).start()

        try:
            result = self._send_request("initialize", {
                "protocolVersion": PROTOCOL_VERSION,
                "capabilities": {},
                "clientInfo": {"name": "nws-weather-client", "version": "1.0.0"},
            })
        except ToolClientError:
            self.stop()
            raise
        self.server_info = (result or {}).get("serverInfo", {})
        self._send_notification("notifications/initialized")

    def stop(self) -> None:
        if not self.proc:
            return
        proc, self.proc = self.proc, None
        if proc.stdin:
            proc.stdin.close()
        proc.terminate()
        try:
            proc.wait(timeout=5)
        except subprocess.TimeoutExpired:
            proc.kill()
            proc.wait()

    def _stderr_loop(self) -> None:
        proc = self.proc
        if not proc or not proc.stderr:
            return
        for line in iter(proc.stderr.readline, b""):
            msg = line.decode("utf-8", errors="replace").rstrip()
            if msg:
                logger.info(f"[server] {msg}")

    def _reader_loop(self) -> None:
        """Read newline-delimited JSON messages from the server's stdout."""
        proc = self.proc
        if not proc or not proc.stdout:
            return
        for line in iter(proc.stdout.readline, b""):
            text = line.decode("utf-8", errors="replace").strip()
            if not text:
                continue
            try:
                message = json.loads(text)
            except json.JSONDecodeError:
                logger.warning(f"[server output] {text}")
                continue
            self._handle_message(message)

    def _handle_message(self, message: Dict[str, Any]) -> None:
        msg_id = message.get("id")
        if msg_id is None:
            # Notifications (logging, progress) are not used by this client.
            return
        with self._lock:
            q = self._pending.get(msg_id)
        if q:
            q.put(message)
        else:
            logger.warning(f"Received response for unknown id: {msg_id}")

    def _next_id(self) -> int:
        with self._lock:
            self._id += 1
            return self._id

    def _send_notification(self, method: str, params: Any = None) -> None:
        message = {"jsonrpc": "2.0", "method": method}
        if params is not None:
            message["params"] = params
        self._write_message(message)

    def _send_request(self, method: str, params: Any = None) -> Any:
        req_id = self._next_id()
        message = {"jsonrpc": "2.0", "method": method, "id": req_id}
        if params is not None:
            message["params"] = params

        q: queue.Queue = queue.Queue()
        with self._lock:
            self._pending[req_id] = q
        try:
            self._write_message(message)
            try:
                response = q.get(timeout=self.timeout)
            except queue.Empty:
                raise ToolClientError(f"Timeout waiting for response to {method}") from None
        finally:
            with self._lock:
                self._pending.pop(req_id, None)

        if "error" in response:
            raise ToolClientError(response["error"].get("message", "Unknown error"))
        return response.get("result")

    def _write_message(self, message: Dict[str, Any]) -> None:
        if not self.proc or self.proc.poll() is not None:
            raise ToolClientError("Weather server is not running")
        payload = json.dumps(message) + "\n"
        try:
            with self._write_lock:
                self.proc.stdin.write(payload.encode("utf-8"))
                self.proc.stdin.flush()
        except OSError as e:
            raise ToolClientError(f"Failed to write to weather server: {e}") from e

    @staticmethod
    def _result(result: Any, method: str) -> Dict[str, Any]:
        if not isinstance(result, dict):
            raise ToolClientError(f"Malformed response to {method}: {result!r}")
        return result

    def list_tools(self) -> List[Dict[str, Any]]:
        result = self._result(self._send_request("tools/list", {}), "tools/list")
        return result.get("tools", [])

    def call_tool(self, tool_name: str, arguments: Dict[str, Any]) -> str:
        """Call a tool and return the text of its first content item."""
        result = self._result(self._send_request("tools/call", {"name": tool_name, "arguments": arguments}), "tools/call")
        content = result.get("content") or []
        text = "".join(item.get("text", "") for item in content[:1] if isinstance(item, dict))
        if result.get("isError"):
            raise ToolClientError(text or f"Tool {tool_name} failed")
        return text


def parse_arguments(pairs: List[str]) -> Dict[str, str]:
    """Turn `key=value` command-line pairs into tool arguments."""
    arguments = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Expected key=value, got {pair!r}")
        arguments[key] = value
    return arguments


def main(argv=None) -> int:
    import argparse

    parser = argparse.ArgumentParser(description="Call a weather tool over stdio")
    parser.add_argument("tool", help="get_alerts or get_forecast")
    parser.add_argument("arguments", nargs="*", help="tool arguments as key=value")
    args = parser.parse_args(argv)

    try:
        arguments = parse_arguments(args.arguments)
    except ValueError as e:
        parser.error(str(e))

    try:
        with StdioToolClient() as client:
            print(client.call_tool(args.tool, arguments))
    except ToolClientError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
