"""Test package for the frame clock.

Core clock and timer tests feed elapsed time directly and need no pygame.
UI smoke tests run pygame headlessly through the SDL dummy video driver.
Run ``pytest`` from the project root.
"""
