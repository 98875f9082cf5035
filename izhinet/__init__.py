"""izhinet: Izhikevich spiking network simulator.

A pure-numpy reproduction of the Izhikevich (2003) random cortical network:
excitatory regular-spiking and inhibitory fast-spiking cells coupled by a
dense random weight matrix, driven by thalamic noise.

Subpackages:
    simulation    Parameters, connectivity, state, engine, spike log, analysis
    viz           Raster rendering via matplotlib
    utils         Print-based logging
"""

__version__ = "0.1.0"
