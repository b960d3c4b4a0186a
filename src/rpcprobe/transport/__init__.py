"""
Transport - JSON-RPC over HTTP(S) for rpcprobe.

Uses httpx (with HTTP/2 negotiation) for the wire and jsonschema to check
that every decoded body is a JSON-RPC response envelope.
"""
