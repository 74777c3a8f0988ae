"""Chat log types, reply segmentation and chat continuation."""
