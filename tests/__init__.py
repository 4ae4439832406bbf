"""Tests for matrixgame.

The tests folder is a package so that test modules can share helpers such as
tests.random_game; pytest then treats the folder above it as root folder.
"""
