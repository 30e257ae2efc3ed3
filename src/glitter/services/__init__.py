"""
Glitter - Services

Stateless operations around the Scene model:
- rasterizer: pixel primitives, compositing, frame encoding
- compact_doc: compact JSON codec
- file_operations: load/save compact documents
- image_export: PNG export of a rendered frame
- interaction: mouse hit-testing, resizing and pending actions
"""
