"""Static station maps from a city boundary, stations and TIGER primary roads."""
