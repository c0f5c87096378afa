#!/usr/bin/env python3
"""MPRIS2 over D-Bus addressing and payload helpers"""
