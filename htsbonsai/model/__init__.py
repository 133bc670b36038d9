"""Voice model structures, interpolation weights and per-label parameter selection."""