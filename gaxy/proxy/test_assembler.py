from gaxy.proxy.assembler import assemble_response


def test_status_body_and_content_type():
    response = assemble_response(b"console.log(1)", "text/javascript", 200)

    assert response.status_code == 200
    assert response.body == b"console.log(1)"
    assert response.headers["content-type"] == "text/javascript"
    assert response.headers["x-proxy-by"] == "gaxy"


def test_content_type_is_not_redetected():
    response = assemble_response(b"{}", "application/json; charset=ISO-8859-1", 201)

    assert response.headers["content-type"] == "application/json; charset=ISO-8859-1"
    assert response.status_code == 201


def test_missing_content_type_left_out():
    response = assemble_response(b"", "", 204)

    assert "content-type" not in response.headers
    assert response.headers["x-proxy-by"] == "gaxy"
