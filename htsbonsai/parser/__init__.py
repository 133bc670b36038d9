"""Readers for the .htsvoice model file format."""