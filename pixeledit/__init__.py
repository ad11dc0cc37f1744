"""Pixel art bitmap editor core"""
