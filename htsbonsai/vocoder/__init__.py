"""Waveform generation from log F0, spectrum and low-pass filter parameters."""