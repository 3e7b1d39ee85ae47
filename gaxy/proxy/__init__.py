"""
Forwarding pipeline for Google Analytics / Tag Manager traffic.

A request flows through these steps, one module each:

    origin      -> pick the upstream origin from the path
    transform   -> build the upstream request (prefix, query params, host)
    client      -> send it over the pooled httpx client
    decoder     -> undo the upstream Content-Encoding
    rewriter    -> point Google hostnames in JavaScript back at the proxy
    assembler   -> build the client-facing response

``pipeline.forward_request`` chains them together.
"""
