import logging

from flask import Flask, g

from mediashelf_app.log import log


def test_log_writes_through_package_logger(caplog):
    with caplog.at_level(logging.INFO, logger="mediashelf_app"):
        log("hello")

    assert [(r.name, r.getMessage()) for r in caplog.records] == [("mediashelf_app", "hello")]


def test_log_prefixes_request_id(caplog):
    app = Flask(__name__)
    with app.test_request_context(), caplog.at_level(logging.INFO, logger="mediashelf_app"):
        g.request_id = "abc123"
        log("lookup done")

    assert caplog.records[-1].getMessage() == "[abc123] lookup done"
