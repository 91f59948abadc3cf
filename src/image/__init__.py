"""Disk image ingestion.

This package enumerates partitions of raw images, picks the Linux root
partition, and copies its contents into a stratum directory.
"""
