"""Renderers turning markdown documents into output formats."""
