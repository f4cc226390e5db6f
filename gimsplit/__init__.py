"""
# gimsplit

Split GIM files (the raster image container of the PSP) into standard images
and into standalone GIM files, one for each picture.

The format is described declaratively: each component of the file is a Chunk,
made of Fields, on which two basic operations are defined

 1. unpack(): read the binary data from a Stream and build a high-level
    representation of that. The chunk knows how many bytes it needs and it
    reads them from the actual position of the stream.

 2. pack(): encode the high-level representation into binary data.

Every access to the underlying data goes through a Stream that refuses to
read outside of the window it was given, so that a malformed file ends up in
a FormatError instead of garbage.
"""
