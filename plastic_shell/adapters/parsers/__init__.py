"""Decoders for the text and XML replies of the cm tool."""
