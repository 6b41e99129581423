"""
Global constants shared by the detectors.
"""

# Detectable range of the tuner, C1 to C6
MIN_FREQ = 32.70
MAX_FREQ = 1046.50

# Power cepstrum peak filtering, in quefrency bins and unnormalized amplitude
CEPSTRUM_MIN_PEAK_DISTANCE = 60
CEPSTRUM_MIN_PEAK_PROMINENCE = 10.0

# Algorithm names
AUTOCORRELATION_ALGORITHM = 'Autocorrelation'
POWER_CEPSTRUM_ALGORITHM = 'PowerCepstrum'
HANNED_FFT_ALGORITHM = 'HannedFFT'
