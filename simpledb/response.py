import logging

import requests
from lxml import etree
from lxml import objectify


logger = logging.getLogger(__name__)

XML_NAMESPACE = 'http://sdb.amazonaws.com/doc/2009-04-15/'

XMLParser = etree.XMLParser(resolve_entities=False)
ObjectifyParser = objectify.makeparser(resolve_entities=False)


class SimpleDbResponse():
    """Wrapper around requests.Response holding a SimpleDB reply.

    The body is parsed on first access. Accessors return False when the body cannot be read or
    is not well-formed XML, so check the result before using it.
    """
    namespace_prefix = 'sdb'  # alias of `namespace` in XPath expressions

    def __init__(self, http_response):
        assert isinstance(http_response, requests.Response)
        self.http_response = http_response
        self.namespace = XML_NAMESPACE
        self._document = None  # None - not parsed yet, False - parsing failed
        self._xpath = None

    def __repr__(self):
        return '<SimpleDbResponse [%s]>' % self.http_response.status_code

    def get_http_response(self):
        return self.http_response

    def get_namespace(self):
        return self.namespace

    def set_namespace(self, namespace):
        """Set the namespace for XPath queries.
        Has no effect on an evaluator which was already created by `get_xpath`.
        """
        self.namespace = namespace

    def _get_body(self):
        """Get the response body or False if it could not be retrieved.
        """
        try:
            body = self.http_response.content
        except (requests.RequestException, RuntimeError) as exc:
            logger.debug('Could not read response body: %s', exc)
            return False
        return body or False

    def get_document(self):
        """Get lxml element tree of the response body and cache it.
        """
        body = self._get_body()
        if self._document is None:
            if body is False:
                self._document = False
            else:
                try:
                    self._document = etree.fromstring(body, XMLParser).getroottree()
                except etree.XMLSyntaxError as exc:
                    logger.debug('Response body is not well-formed XML: %s', exc)
                    self._document = False
        return self._document

    def get_xpath(self):
        """Get XPath evaluator for the response document with `namespace` registered under
        `namespace_prefix`.
        """
        if self._xpath is None:
            document = self.get_document()
            if document is False:
                self._xpath = False
            else:
                try:
                    self._xpath = etree.XPathEvaluator(
                        document, namespaces={self.namespace_prefix: self.get_namespace()})
                except (TypeError, ValueError) as exc:
                    # lxml rejects an empty namespace URI
                    logger.debug('Could not bind namespace %r: %s', self.get_namespace(), exc)
                    self._xpath = False
        return self._xpath

    def get_simplexml_document(self):
        """Parse the response body into an objectified tree allowing attribute access to child
        elements, e.g. `doc.ListDomainsResult.DomainName`. The result is not cached.
        """
        body = self._get_body()
        if body is False:
            return False
        try:
            return objectify.fromstring(body, ObjectifyParser)
        except etree.XMLSyntaxError as exc:
            logger.debug('Response body is not well-formed XML: %s', exc)
            return False

    def query(self, expression, **variables):
        """Evaluate an XPath expression against the response document.
        Returns None if the document is not available.
        """
        xpath = self.get_xpath()
        if xpath is False:
            return None
        return xpath(expression, **variables)

    def _find_text(self, expression):
        nodes = self.query(expression.format(prefix=self.namespace_prefix))
        if not nodes:
            return None
        return nodes[0].text

    def get_request_id(self):
        return self._find_text('//{prefix}:ResponseMetadata/{prefix}:RequestId')

    def get_box_usage(self):
        """Machine utilization charged for the request, in hours.
        """
        box_usage = self._find_text('//{prefix}:ResponseMetadata/{prefix}:BoxUsage')
        if not box_usage:
            return None
        try:
            return float(box_usage)
        except ValueError:
            logger.debug('BoxUsage is not a number: %r', box_usage)
            return None

    def get_next_token(self):
        """Token to pass with the next request to get the following page of results.
        """
        return self._find_text('//{prefix}:NextToken')
