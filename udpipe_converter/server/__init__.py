"""HTTP API for reshaping and annotation (FastAPI).

Run with ``udpipe-converter-api`` or ``uvicorn udpipe_converter.server.app:app``.
"""
