"""vision-proxy: image reads for text-only GLM models.

Text-only models (glm-4.6, glm-4.7, glm-4.7-flash) cannot consume image
bytes. The image_summary plugin overrides readFile so that image reads are
analyzed by the glm-4.6v vision model in a subprocess and returned as text.
"""

__version__ = "0.1.0"
