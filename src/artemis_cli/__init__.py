"""
Artemis CLI

A command-line client for students working with the Artemis learning
platform: list courses and exercises, start an exercise by cloning its
repository, and submit solutions to get automated test feedback.
"""

__version__ = "0.1.0"
