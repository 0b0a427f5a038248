"""Test suite for chatstream.

Unit tests live under unit/ grouped by domain, integration tests that talk
to a real websockets server live under integration/, and shared fakes live
in helpers/.
"""
