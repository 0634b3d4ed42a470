"""
Glob normalization.

A validated glob is reshaped before it reaches the filesystem:

1. slash repair        ./views*     -> ./views/*      (the literal form is kept too)
2. depth expansion     ./views/*    -> ./views/*, ./views/**/*      (loose only)
3. extension inference ./views/*    -> ./views/*.{js,ts}, ./views/*/index.{js,ts}

Each step maps one glob to one or more globs; duplicates are dropped with the
first occurrence winning.
"""
import posixpath


def _last_wildcard(glob):
    return glob.rfind("*")


def repair_slash(glob):
    """
    Insert the missing slash before the last wildcard.

    `./views*` -> [`./views/*`, `./views*`]
    `./views*.js` -> [`./views/*.js`, `./views*.js`]

    The unrepaired glob is kept as a second alternative: `./pages/page*.js`
    legitimately means page1.js, page2.js, ...
    """
    index = _last_wildcard(glob)
    if index <= 0 or glob[index - 1] == "/":
        return [glob]
    return [glob[:index] + "/" + glob[index:], glob]


def expand_depth(glob):
    """
    Match unlimited levels of subdirectories as well.

    foo/*        -> [foo/*, foo/**/*]
    foo/*.js     -> [foo/*.js, foo/**/*.js]
    foo*         -> [foo*, foo*/**/*]
    foo*bar.js   -> [foo*bar.js, foo*/**/*bar.js]
    foo*/bar.js  -> [foo*/bar.js, foo*/**/bar.js]
    """
    if "**" in glob:
        return [glob]

    index = _last_wildcard(glob)
    if index < 0:
        return [glob]

    head, tail = glob[: index + 1], glob[index + 1:]
    if head.endswith("/*"):
        return [glob, head[:-1] + "**/*" + tail]
    return [glob, head + "/**" + (tail if tail.startswith("/") else "/*" + tail)]


def has_extension(glob):
    # `foo.bar*` names no extension, the wildcard is part of it
    ext = posixpath.splitext(posixpath.basename(glob))[1]
    return ext != "" and "*" not in ext


def infer_extension(glob, extensions):
    """
    Fill in the importable extensions when the glob names none.

    `./views/*` -> [`./views/*.{js,ts}`, `./views/*/index.{js,ts}`]

    A glob containing `**` already reaches `*/index` files, so it gets no
    index variant.
    """
    if has_extension(glob):
        return [glob]

    bare_exts = ",".join(ext[1:] for ext in extensions)
    globs = [f"{glob}.{{{bare_exts}}}"]
    if "**" not in glob:
        globs.append(f"{glob}/index.{{{bare_exts}}}")
    return globs


def _flat_map(step, globs):
    result = []
    for glob in globs:
        for item in step(glob):
            if item not in result:
                result.append(item)
    return result


def normalize_glob(glob, extensions, loose=True):
    """
    Run the normalization pipeline on one validated glob.

    Args:
        glob: Glob from dynamic_import_to_glob()
        extensions: Resolvable extensions, with leading dots
        loose: Also match subdirectories at any depth

    Returns:
        Ordered, de-duplicated list of globs for the file enumerator
    """
    globs = repair_slash(glob)
    if loose:
        globs = _flat_map(expand_depth, globs)
    return _flat_map(lambda g: infer_extension(g, extensions), globs)
