import logging

from previews import DomePreview, RingPreview
from scene import Scene

logging.basicConfig(level=logging.INFO)

scene = Scene()
scene.add_preview(RingPreview, 'ring')
scene.add_preview(DomePreview, 'dome')

scene.finish()
