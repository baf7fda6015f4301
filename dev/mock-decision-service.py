#!/usr/bin/env python3
"""Mock XACML decision service for local development.

Permits every action except `delete`, and denies everything for organization `org:denied`.
"""

import re
import sys

from flask import Flask, Response, jsonify, request

app = Flask(__name__)

_RESPONSE = """<?xml version="1.0" encoding="UTF-8"?>
<Response>
  <Result>
    <Decision>{decision}</Decision>
  </Result>
</Response>
"""


def _attribute_values(body: str) -> list:
    return re.findall(r"<AttributeValue>(.*?)</AttributeValue>", body, flags=re.DOTALL)


@app.route("/pdp/v3", methods=["POST"])
def decide():
    """Return a Permit/Deny decision based on the requested action."""
    values = _attribute_values(request.get_data(as_text=True))
    # Template order: subject, resource (organization), action
    organization = values[1].strip() if len(values) > 1 else ""
    action = values[2].strip() if len(values) > 2 else ""
    decision = "Deny" if action == "delete" or organization == "org:denied" else "Permit"
    return Response(_RESPONSE.format(decision=decision), mimetype="application/xml")


@app.route("/healthz")
def health():
    """Health check endpoint."""
    return jsonify({"status": "ok"})


if __name__ == "__main__":
    print("Mock decision service starting on http://0.0.0.0:7070", file=sys.stderr)
    app.run(host="0.0.0.0", port=7070, debug=False)
