"""Stratum ingestion pipeline.

This package classifies import sources, populates the stratum directory,
and normalizes the resulting tree with guaranteed rollback on failure.
"""
